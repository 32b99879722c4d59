"""Settings loading (YAML/JSON) for projpack."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List

import yaml

from .descriptor import DESCRIPTOR_TAG
from .errors import E_CONFIG, ConfigError
from .staging import DEFAULT_CLEANUP_DELAY

__all__ = [
    "Settings",
    "DEFAULT_THUMBNAIL_DIR",
    "CLEANUP_DELAY_ENV",
    "load_settings",
    "settings_from_dict",
]

DEFAULT_THUMBNAIL_DIR = "../common/thumbs"
CLEANUP_DELAY_ENV = "PROJPACK_CLEANUP_DELAY"


@dataclass(slots=True)
class Settings:
    include_meshes: bool = False
    thumbnail_dir: str = DEFAULT_THUMBNAIL_DIR
    cleanup_delay: float = DEFAULT_CLEANUP_DELAY
    resource_locations: List[str] = field(default_factory=list)
    descriptor_tag: str = DESCRIPTOR_TAG


_EXPECTED_TYPES = {
    "include_meshes": (bool,),
    "thumbnail_dir": (str,),
    "cleanup_delay": (int, float),
    "resource_locations": (list,),
    "descriptor_tag": (str,),
}


def _config_error(message: str, **ctx: Any) -> ConfigError:
    return ConfigError(code=E_CONFIG, message=message, context=ctx or None)


def settings_from_dict(data: dict[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise _config_error(f"Unknown setting(s): {', '.join(unknown)}")
    for key, value in data.items():
        expected = _EXPECTED_TYPES[key]
        # bool is an int subclass; reject it for numeric settings
        if not isinstance(value, expected) or (
            isinstance(value, bool) and bool not in expected
        ):
            raise _config_error(
                f"Setting '{key}' has invalid type {type(value).__name__}",
                key=key,
            )
    settings = Settings(**data)
    settings.cleanup_delay = float(settings.cleanup_delay)
    settings.resource_locations = [str(p) for p in settings.resource_locations]
    return settings


def _apply_env(settings: Settings) -> Settings:
    raw = os.getenv(CLEANUP_DELAY_ENV)
    if raw:
        try:
            settings.cleanup_delay = float(raw)
        except ValueError as e:
            raise _config_error(
                f"{CLEANUP_DELAY_ENV} must be a number, got {raw!r}"
            ) from e
    return settings


def load_settings(path: str | Path | None = None) -> Settings:
    if path is None:
        return _apply_env(Settings())
    p = Path(path)
    if not p.exists():
        raise _config_error(f"Settings file not found: {p}", path=str(p))
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise _config_error(f"Could not parse {p}: {e}", path=str(p)) from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise _config_error("Root of settings file must be a mapping", path=str(p))
    return _apply_env(settings_from_dict(data))
