"""Material loading collaborator.

The export pipeline loads every material file before collecting its
textures. Loading reports one of three outcomes so that a material which
is already registered does not abort an export while a broken file does.
"""

from __future__ import annotations

import json
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict

from .logging import get_logger

__all__ = ["LoadOutcome", "MaterialLoader", "JsonMaterialLoader"]


class LoadOutcome(Enum):
    NEW = auto()
    ALREADY_PRESENT = auto()
    ERROR = auto()


class MaterialLoader:
    def load(self, path: str) -> LoadOutcome:
        raise NotImplementedError


class JsonMaterialLoader(MaterialLoader):
    """Registers material files by resolved path after a JSON parse check."""

    def __init__(self) -> None:
        self.loaded: Dict[str, Any] = {}
        self.last_error: str | None = None

    def load(self, path: str) -> LoadOutcome:
        key = str(Path(path).resolve())
        if key in self.loaded:
            return LoadOutcome.ALREADY_PRESENT
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            self.last_error = f"{path}: {e}"
            get_logger().debug("Material load failed: %s", self.last_error)
            return LoadOutcome.ERROR
        self.loaded[key] = data
        return LoadOutcome.NEW
