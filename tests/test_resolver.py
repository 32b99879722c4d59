from pathlib import Path

from projpack.resolver import (
    DirectoryResourceRegistry,
    RegistryEntry,
    StaticResourceRegistry,
    TextureResolver,
)


def test_registry_takes_priority_over_texture_list():
    registry = StaticResourceRegistry([RegistryEntry("/res/General", "wood_d.png")])
    resolver = TextureResolver(registry, ["/project/tex/wood_d.png"])
    assert resolver.resolve("wood_d.png") == "/res/General/wood_d.png"


def test_falls_back_to_texture_list():
    registry = StaticResourceRegistry([RegistryEntry("/res", "other.png")])
    resolver = TextureResolver(registry, ["/a/x.png", r"C:\tex\wood_d.png", "/b/wood_d.png"])
    assert resolver.resolve("wood_d.png") == r"C:\tex\wood_d.png"


def test_unresolved_returns_none():
    resolver = TextureResolver(None, ["/a/x.png"])
    assert resolver.resolve("wood_d.png") is None


def test_matching_is_case_sensitive():
    registry = StaticResourceRegistry([RegistryEntry("/res", "Wood_D.png")])
    resolver = TextureResolver(registry, ["/a/WOOD_D.PNG"])
    assert resolver.resolve("wood_d.png") is None


def test_directory_registry_lists_locations_in_order(tmp_path: Path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    for d in (first, second):
        d.mkdir()
        (d / "shared.png").write_bytes(b"x")
    (second / "only_second.png").write_bytes(b"x")
    (first / "nested").mkdir()
    registry = DirectoryResourceRegistry([first, tmp_path / "missing", second])
    resolver = TextureResolver(registry)
    assert resolver.resolve("shared.png") == f"{first.as_posix()}/shared.png"
    assert resolver.resolve("only_second.png") == f"{second.as_posix()}/only_second.png"
    assert resolver.resolve("nested") is None
