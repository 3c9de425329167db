"""
Command-line interface and main entry point for scene_dump.

Handles workflow orchestration and user interaction.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import tempfile
from pathlib import Path

from .args_parser import parse_args
from .bundles import BundleEnumerator, EnumerationError
from .config import ConfigurationError, load_settings
from .controller import SceneDumpController
from .smoke import prepare_simulated_scan


def _list_bundles(args: argparse.Namespace) -> int:
    """Print the bundles a scan would visit. Returns exit code."""
    try:
        settings = load_settings(
            env_file=args.env_file,
            game_root=args.game_root,
            bundle_root=args.bundle_root,
            dump_path=args.output,
        )
    except ConfigurationError as exc:
        logging.error("Configuration incomplete: %s", exc)
        return 1

    enumerator = BundleEnumerator(settings.bundle_root, settings.bundle_extension)
    try:
        bundles = enumerator.list_bundles()
    except EnumerationError as exc:
        logging.error("%s (%s)", exc, exc.status)
        return 1

    for bundle in bundles:
        print(bundle)
    print(f"\n{len(bundles)} bundle(s) under {settings.bundle_root}")
    print(f"Records would be appended to {settings.dump_path}")
    return 0


def _install_interrupt_handler(controller: SceneDumpController):
    def _handler(_signum, _frame):
        logging.warning("Interrupt received; stopping after the current scene.")
        controller.interrupt()

    return signal.signal(signal.SIGINT, _handler)


def _run_simulation(args: argparse.Namespace) -> int:
    """Scan the sample bundle tree with the simulated host. Returns exit code."""
    work_dir = Path(tempfile.mkdtemp(prefix="scene_dump_smoke_"))
    print(f"Simulated bundle tree: {work_dir / 'bundles'}")
    result = prepare_simulated_scan(work_dir, args.output)
    controller = result.controller
    previous = _install_interrupt_handler(controller)
    try:
        controller.run_scan()
    finally:
        signal.signal(signal.SIGINT, previous)
    controller.status_reporter.show_status(scanning=controller.is_scanning)
    print(f"Records appended to {result.settings.dump_path}")
    if controller.state.status != "Full scan complete":
        return 2
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for scene_dump CLI."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )
    if args.command == "bundles":
        return _list_bundles(args)
    return _run_simulation(args)
