"""
Argument parsing for the scene_dump CLI.

Handles command-line argument definition, parsing, and validation.
"""

from __future__ import annotations

import argparse
from pathlib import Path

COMMANDS = ("bundles", "simulate")


def add_path_arguments(parser: argparse.ArgumentParser) -> None:
    """Add game, bundle and output path arguments."""
    parser.add_argument(
        "--game-root",
        type=Path,
        help="Game installation folder (default: SCENE_DUMP_GAME_ROOT or config_local.GAME_ROOT_PATH).",
    )
    parser.add_argument(
        "--bundle-root",
        type=Path,
        help="Folder holding the .bundle files (default: derived from the game root).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="CSV file records are appended to (default: AllSceneDataDump.csv in the game root).",
    )


def add_runtime_arguments(parser: argparse.ArgumentParser) -> None:
    """Add environment and logging arguments."""
    parser.add_argument(
        "--env-file",
        help="Optional .env file to load (default: SCENE_DUMP_ENV_FILE or ~/.env).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")


def build_parser() -> argparse.ArgumentParser:
    """Create the scene_dump argument parser."""
    parser = argparse.ArgumentParser(
        description="Scene data dump scanner: walk every scene bundle and append persistent-state records to a CSV.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=COMMANDS,
        help="bundles: list the bundles a scan would visit; simulate: run a full scan against sample data.",
    )
    add_path_arguments(parser)
    add_runtime_arguments(parser)
    return parser


def _validate_and_transform_args(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """Validate and transform parsed arguments."""
    for name in ("game_root", "bundle_root", "output"):
        value = getattr(args, name)
        if value is not None:
            setattr(args, name, value.expanduser())
    if args.output is not None and args.output.is_dir():
        parser.error("--output must be a file path, not a directory.")


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse and process command-line arguments for scene_dump."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _validate_and_transform_args(args, parser)
    return args
