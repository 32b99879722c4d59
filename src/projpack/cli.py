"""Command line interface for projpack."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import export_project, import_project, inspect_archive, validate_archive
from .config import load_settings
from .errors import PortError
from .logging import configure_logging, section, step
from .plugin import ExportRequest, ImportRequest
from .reporting import (
    set_reporter,
    get_reporter,
    PlainReporter,
    JsonLinesReporter,
    SilentReporter,
    RichReporter,
    set_verbosity,
)


def _export_cmd(args: argparse.Namespace) -> int:
    settings = args.settings
    if args.resource_location:
        settings.resource_locations = list(args.resource_location)
    request = ExportRequest(
        export_dir=args.export_dir,
        project_name=args.project_name,
        material_files=args.material,
        texture_files=args.texture,
        datablock_textures=args.datablock_texture,
        mesh_files=args.mesh,
        include_meshes=args.include_meshes or settings.include_meshes,
        materials_manifest=args.materials_cfg,
        textures_manifest=args.textures_cfg,
        thumbnail_dir=args.thumbnail_dir,
    )
    with section("Export"):
        result = export_project(
            request, settings=settings, cleanup=not args.no_cleanup
        )
    step(result.success_text)
    return 0


def _import_cmd(args: argparse.Namespace) -> int:
    archive: Path = args.archive
    request = ImportRequest(
        archive_dir=archive.parent,
        archive_name=archive.name,
        import_root=args.import_root,
        thumbnail_dir=args.thumbnail_dir,
    )
    with section("Import"):
        result = import_project(request, settings=args.settings)
    step(f"Project descriptor: {result.descriptor_path}")
    step(f"Resource location: {result.resource_location}")
    return 0


def _validate_cmd(args: argparse.Namespace) -> int:
    validate_archive(args.archive)
    return 0


def _inspect_cmd(args: argparse.Namespace) -> int:
    entries = inspect_archive(args.archive)
    rep = get_reporter()
    rep.flush()
    print(json.dumps(entries, indent=2, sort_keys=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="projpack", description="Project archive export/import tool"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Settings file (YAML or JSON)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    e = sub.add_parser("export", help="Pack project files into an archive")
    e.add_argument("export_dir", type=Path)
    e.add_argument("project_name")
    e.add_argument("--material", action="append", default=[], metavar="PATH")
    e.add_argument("--texture", action="append", default=[], metavar="PATH")
    e.add_argument(
        "--datablock-texture",
        dest="datablock_texture",
        action="append",
        default=[],
        metavar="NAME",
        help="Base name of a texture used by a loaded material",
    )
    e.add_argument("--mesh", action="append", default=[], metavar="PATH")
    e.add_argument(
        "--include-meshes",
        dest="include_meshes",
        action="store_true",
        help="Add the given mesh files to the archive",
    )
    e.add_argument("--materials-cfg", dest="materials_cfg", type=Path)
    e.add_argument("--textures-cfg", dest="textures_cfg", type=Path)
    e.add_argument(
        "--resource-location",
        dest="resource_location",
        action="append",
        default=[],
        metavar="DIR",
        help="Resource search location (overrides the settings file)",
    )
    e.add_argument("--thumbnail-dir", dest="thumbnail_dir", type=Path)
    e.add_argument(
        "--no-cleanup",
        dest="no_cleanup",
        action="store_true",
        help="Keep staged copies next to the archive",
    )
    e.set_defaults(func=_export_cmd)

    i = sub.add_parser("import", help="Unpack an archive into a new project")
    i.add_argument("archive", type=Path)
    i.add_argument("import_root", type=Path)
    i.add_argument("--thumbnail-dir", dest="thumbnail_dir", type=Path)
    i.set_defaults(func=_import_cmd)

    v = sub.add_parser("validate", help="Validate an archive")
    v.add_argument("archive", type=Path)
    v.set_defaults(func=_validate_cmd)

    s = sub.add_parser("inspect", help="List archive entries as JSON")
    s.add_argument("archive", type=Path)
    s.set_defaults(func=_inspect_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    requested = args.reporter
    if requested == "json":
        set_reporter(JsonLinesReporter())
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich without a TTY falls back to plain
        set_reporter(PlainReporter())
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    rep = get_reporter()
    try:
        args.settings = load_settings(args.config)
        return args.func(args)
    except PortError as e:
        rep.error(e.message, code=e.code, **(e.context or {}))
        return 1
    finally:
        rep.flush()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
