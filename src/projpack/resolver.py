"""Texture lookup across the resource registry and the project texture list."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .logging import get_logger
from .utils.paths import base_name

__all__ = [
    "RegistryEntry",
    "ResourceRegistry",
    "StaticResourceRegistry",
    "DirectoryResourceRegistry",
    "TextureResolver",
]


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    archive_root: str
    base_name: str


class ResourceRegistry:
    """Key -> file listing service for known resource search locations."""

    def entries(self) -> Iterable[RegistryEntry]:
        raise NotImplementedError

    def find(self, name: str) -> Optional[RegistryEntry]:
        for entry in self.entries():
            if entry.base_name == name:
                return entry
        return None


class StaticResourceRegistry(ResourceRegistry):
    def __init__(self, entries: Iterable[RegistryEntry] = ()):
        self._entries = list(entries)

    def entries(self) -> Iterable[RegistryEntry]:
        return list(self._entries)


class DirectoryResourceRegistry(ResourceRegistry):
    """Lists the files of each search location, non-recursively, in order."""

    def __init__(self, locations: Sequence[str | Path]):
        self.locations = [Path(p) for p in locations]

    def entries(self) -> Iterable[RegistryEntry]:
        for location in self.locations:
            if not location.is_dir():
                get_logger().debug("Skipping missing resource location %s", location)
                continue
            for child in sorted(location.iterdir()):
                if child.is_file():
                    yield RegistryEntry(location.as_posix(), child.name)


class TextureResolver:
    def __init__(
        self,
        registry: ResourceRegistry | None,
        texture_paths: Sequence[str] = (),
    ):
        self.registry = registry
        self.texture_paths: List[str] = list(texture_paths)

    def from_registry(self, name: str) -> Optional[str]:
        if self.registry is None:
            return None
        entry = self.registry.find(name)
        if entry is None:
            return None
        return f"{entry.archive_root}/{name}"

    def from_texture_list(self, name: str) -> Optional[str]:
        for path in self.texture_paths:
            if base_name(path) == name:
                return path
        return None

    def resolve(self, name: str) -> Optional[str]:
        found = self.from_registry(name)
        if found is None:
            found = self.from_texture_list(name)
        return found
