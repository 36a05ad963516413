"""
Main entry point for terrain-sprites.
Usage: python -m terrain_sprites <command> [options]
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .settings import AppSettings, ConfigError
from .sprites import SpriteService
from .sprites.models import Climate, FallbackMarker, Height, TerrainAttributes, Vegetation
from .utils.logging_config import setup_logging


def _add_triple_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("vegetation", choices=[v.value for v in Vegetation])
    parser.add_argument("climate", choices=[c.value for c in Climate])
    parser.add_argument("height", choices=[h.value for h in Height])


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="terrain-sprites",
        description="Resolve terrain sprites by hierarchical fallback.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--assets", help="sprite asset directory (overrides settings)")
    parser.add_argument("--settings", help="INI settings file instead of the native store")
    parser.add_argument("--profile", default="default", help="settings profile name")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")

    commands = parser.add_subparsers(dest="command", required=True)

    resolve = commands.add_parser("resolve", help="resolve one tile")
    _add_triple_arguments(resolve)

    candidates = commands.add_parser("candidates", help="list sprite files tried for a tile")
    _add_triple_arguments(candidates)

    commands.add_parser("preload", help="resolve every attribute combination")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")

    settings = AppSettings(profile=args.profile, settings_file=args.settings)
    setup_logging(settings, console_level="DEBUG" if args.verbose else None)
    logger.debug(f"Configuration loaded from {settings.get_settings_file_path()}")

    try:
        service = SpriteService.from_settings(settings, asset_root=args.assets)
    except ConfigError as e:
        logger.error(f"Configuration validation failed: {e}")
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.command == "preload":
        report = service.preload()
        print(
            f"{len(report.results)} combinations: {report.sprite_count} sprites, "
            f"{report.fallback_count} fallbacks, {len(report.errors)} errors"
        )
        return 0 if not report.errors else 1

    attributes = TerrainAttributes.from_ids(args.vegetation, args.climate, args.height)

    if args.command == "candidates":
        for filename in service.candidate_filenames(attributes):
            print(filename)
        return 0

    result = service.resolve(attributes)
    if isinstance(result, FallbackMarker):
        print(f"fallback {result.color}")
    else:
        print(result.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
