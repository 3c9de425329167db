"""Orchestration components: scanning every bundle and reporting scan status"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

from .bundles import BundleEnumerator, EnumerationError, SceneRef, scene_refs_from_paths
from .cleanup import LoadingScreenSweeper
from .config import ScanSettings
from .danger_filter import is_dangerous
from .host import BundleHandle, SceneHost
from .lifecycle import SceneLifecycle
from .scheduler import format_duration
from .sink import CsvRecordSink
from .state import ScanState

TRIGGER_HINT = "Trigger a full scan (best from the main menu, before loading a save)"


class ScanOrchestrator:  # pylint: disable=too-many-instance-attributes
    """Scans all bundles one by one: open → scenes → release"""

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        host: SceneHost,
        scheduler,
        enumerator: BundleEnumerator,
        sink: CsvRecordSink,
        sweeper: LoadingScreenSweeper,
        state: ScanState,
        settings: ScanSettings,
    ):
        self.host = host
        self.scheduler = scheduler
        self.enumerator = enumerator
        self.sink = sink
        self.sweeper = sweeper
        self.state = state
        self.settings = settings
        self.interrupted = False

    def run(self) -> ScanState:
        """Run one full scan from the host's current state"""
        state = self.state
        state.reset()
        state.set_status("Starting scan")
        logging.info("Starting full scan from current state.")
        try:
            bundles = self.enumerator.list_bundles()
        except EnumerationError as exc:
            logging.error("%s", exc)
            state.set_status(exc.status)
            return state

        state.total_bundles = len(bundles)
        logging.info("Found %d bundles total.", len(bundles))

        original = self.host.get_active_scene()
        state.original_active_scene = original
        state.original_active_scene_name = original.name

        state.suppress_passive_dump = True
        try:
            for index, bundle_path in enumerate(bundles):
                if self.interrupted:
                    break
                self.scan_bundle(index, bundle_path)
        finally:
            state.suppress_passive_dump = False

        if self.interrupted:
            logging.warning(
                "Scan interrupted at bundle %d/%d.", state.current_bundle_index, state.total_bundles
            )
            state.set_status("Scan interrupted")
            return state
        state.set_status("Full scan complete")
        self._log_summary()
        return state

    def scan_bundle(self, index: int, bundle_path: Path) -> None:
        """Open a bundle, scan each of its scenes, then release it"""
        state = self.state
        state.current_bundle_index = index
        state.current_bundle_path = str(bundle_path)
        state.current_scene_name = ""
        state.set_status("Loading bundle")
        logging.info("[%d/%d] Bundle: %s", index, state.total_bundles, bundle_path)

        bundle = self._open_bundle(bundle_path)
        if bundle is None:
            self.scheduler.delay(self.settings.scene_pacing)
            return

        scenes = self._list_scenes(bundle)
        if not scenes:
            logging.info("Bundle has 0 scene(s).")
            state.set_status("0 scenes")
            self._release_bundle(bundle)
            self.scheduler.delay(self.settings.scene_pacing)
            return

        logging.info("Bundle has %d scene(s).", len(scenes))
        state.set_status(f"scenes: {len(scenes)}")
        for scene in scenes:
            if self.interrupted:
                break
            self.scan_scene(scene)

        self._release_bundle(bundle)
        state.set_status("bundle done")
        self.scheduler.delay(self.settings.bundle_pacing)

    def scan_scene(self, scene: SceneRef) -> None:
        """Dedup and danger checks, then one lifecycle attempt and a cleanup sweep"""
        state = self.state
        state.current_scene_name = scene.short_name
        state.set_status("Loading scene")

        if scene.short_name in state.dumped_scenes:
            logging.info("  -> already dumped '%s', skipping.", scene.short_name)
            state.scenes_already_dumped += 1
            state.set_status("already dumped")
            return
        if is_dangerous(scene.short_name):
            logging.info("  -> skipping bootstrap '%s'", scene.short_name)
            state.scenes_filtered += 1
            state.set_status("skipped (bootstrap)")
            return

        lifecycle = SceneLifecycle(self.host, self.scheduler, self.sink, state, self.settings, scene)
        try:
            lifecycle.run()
        except Exception:  # pylint: disable=broad-exception-caught
            logging.exception("  Scene '%s' failed, skipping.", scene.short_name)
            state.scenes_skipped += 1
            state.set_status("scene error")
        state.loading_screens_destroyed += len(self.sweeper.sweep())
        self.scheduler.delay(self.settings.scene_pacing)

    def _open_bundle(self, bundle_path: Path) -> Optional[BundleHandle]:
        try:
            bundle = self.host.open_bundle(bundle_path)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logging.warning("Failed to load bundle '%s': %s", bundle_path, exc)
            self.state.set_status("bundle load fail")
            return None
        if bundle is None:
            logging.warning("Bundle open returned nothing for '%s'", bundle_path)
            self.state.set_status("bundle null")
        return bundle

    def _list_scenes(self, bundle: BundleHandle) -> list[SceneRef]:
        try:
            return scene_refs_from_paths(bundle.scene_paths())
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logging.warning("Listing scene paths threw: %s", exc)
            self.state.set_status("paths error")
            return []

    def _release_bundle(self, bundle: BundleHandle) -> None:
        try:
            bundle.release()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logging.warning("Bundle release threw: %s", exc)

    def _log_summary(self) -> None:
        state = self.state
        elapsed = time.monotonic() - state.started_at if state.started_at is not None else 0.0
        logging.info(
            "Full scan complete in %s: %d scene(s) dumped, %d skipped, %d filtered, "
            "%d already dumped, %d record(s) written, %d write error(s).",
            format_duration(elapsed),
            state.scenes_dumped,
            state.scenes_skipped,
            state.scenes_filtered,
            state.scenes_already_dumped,
            state.records_written,
            state.write_errors,
        )


class StatusReporter:  # pylint: disable=too-few-public-methods
    """Handles displaying scan status"""

    def __init__(self, state: ScanState):
        self.state = state

    def render(self, scanning: bool) -> str:
        """Return the status panel text shown while idle or scanning"""
        state = self.state
        lines = ["Scene Data Dump Scanner", TRIGGER_HINT, ""]
        if scanning:
            lines.extend(
                [
                    "Scanning...",
                    f"Bundle: {state.current_bundle_index}/{state.total_bundles}",
                    f"Scene:  {state.current_scene_name}",
                    f"Status: {state.status}",
                ]
            )
        else:
            lines.extend(
                [
                    f"Status: {state.status}",
                    f"Last Bundle: {state.current_bundle_index}/{state.total_bundles}",
                    f"Last Scene:  {state.current_scene_name}",
                ]
            )
        return "\n".join(lines)

    def show_status(self, scanning: bool = False):
        """Display the status panel and run counters"""
        state = self.state
        print("=" * 70)
        print(self.render(scanning))
        print("=" * 70)
        print(f"Scenes dumped:       {state.scenes_dumped:,}")
        print(f"Scenes skipped:      {state.scenes_skipped:,}")
        print(f"Dangerous filtered:  {state.scenes_filtered:,}")
        print(f"Already dumped:      {state.scenes_already_dumped:,}")
        print(f"Records written:     {state.records_written:,}")
        print(f"Write errors:        {state.write_errors:,}")
        print(f"Overlays destroyed:  {state.loading_screens_destroyed:,}")
        print("=" * 70)
