"""
Load → extract → unload for a single scene.

Every wait is bounded by a wall-clock timeout. A timed-out load or unload is
abandoned, not cancelled: the host may still finish it after the scan has
moved on.
"""

from __future__ import annotations

import logging
from typing import Optional

from .bundles import SceneRef, scene_name_from_path
from .config import ScanSettings
from .extractor import dump_scene
from .host import AsyncOperation, SceneHandle, SceneHost, is_resident
from .scheduler import wait_for_operation
from .sink import CsvRecordSink
from .state import LifecyclePhase, ScanState


class SceneLifecycle:  # pylint: disable=too-many-instance-attributes
    """Drives one scene attempt through its states. One attempt, no retries."""

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        host: SceneHost,
        scheduler,
        sink: CsvRecordSink,
        state: ScanState,
        settings: ScanSettings,
        scene: SceneRef,
    ):
        self.host = host
        self.scheduler = scheduler
        self.sink = sink
        self.state = state
        self.settings = settings
        self.scene = scene
        self.phase = LifecyclePhase.IDLE
        self.records_written = 0
        self.loaded_scene_name: Optional[str] = None

    def _transition(self, phase: LifecyclePhase, status: Optional[str] = None) -> None:
        self.phase = phase
        if status is not None:
            self.state.set_status(status)

    def _skip(self, status: Optional[str] = None) -> None:
        self.state.scenes_skipped += 1
        self._transition(LifecyclePhase.SKIPPED, status)

    def run(self) -> LifecyclePhase:
        """Run the attempt to completion and return the final phase."""
        settled = False
        try:
            settled = self._load_extract_unload()
        finally:
            self._restore_original_context()
        if settled:
            self.scheduler.delay(self.settings.settle_delay)
        return self.phase

    def _load_extract_unload(self) -> bool:
        """Return True once the load finished, False when it never got that far."""
        name = self.scene.short_name
        logging.info("  -> Loading scene '%s'", name)
        self._transition(LifecyclePhase.LOADING, "Loading scene")

        operation, used_short = self._start_load()
        if operation is None:
            logging.warning(
                "  Could not start load for '%s' or '%s'", name, self.scene.full_path
            )
            self._skip("load failed(start)")
            return False

        if not wait_for_operation(operation, self.scheduler, self.settings.load_timeout):
            logging.warning("  Load timeout '%s', skipping dump.", name)
            self._transition(LifecyclePhase.LOAD_TIMEOUT, "load timeout")
            self._skip()
            return False

        self._transition(LifecyclePhase.LOADED)
        # let the scene's own initialization finish
        self.scheduler.next_tick()
        self.scheduler.delay(self.settings.settle_delay)

        loaded = self._resolve_loaded_scene(used_short)
        if loaded is None:
            logging.warning("  Scene '%s' didn't end up loaded? Skipping dump.", name)
            self._skip("not loaded?")
            return True

        extracted = self._try_extract(loaded)
        if self.state.is_original_scene(loaded.name):
            logging.info("  Skipping unload for active '%s'", loaded.name)
        else:
            logging.info("  Unloading '%s'", loaded.name)
            self._transition(LifecyclePhase.UNLOADING, "unloading")
            self._unload(loaded)
        if extracted:
            self._transition(LifecyclePhase.DONE)
        else:
            self._transition(LifecyclePhase.SKIPPED, "scene error")
        return True

    def _start_load(self) -> tuple[Optional[AsyncOperation], bool]:
        """Request an additive load by short name, falling back to the full path."""
        try:
            operation = self.host.load_scene_async(self.scene.short_name)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logging.info("  Load by name threw for %s: %s", self.scene.short_name, exc)
            operation = None
        if operation is not None:
            return operation, True

        try:
            operation = self.host.load_scene_async(self.scene.full_path)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logging.warning("  Load by path threw for %s: %s", self.scene.full_path, exc)
            operation = None
        return operation, False

    def _resolve_loaded_scene(self, used_short: bool) -> Optional[SceneHandle]:
        derived_name = scene_name_from_path(self.scene.full_path)
        scene = self.host.get_scene_by_name(self.scene.short_name if used_short else derived_name)
        if not is_resident(scene) and used_short:
            scene = self.host.get_scene_by_name(derived_name)
        return scene if is_resident(scene) else None

    def _try_extract(self, scene: SceneHandle) -> bool:
        """Extract the scene; a failure skips it but leaves it to be unloaded."""
        try:
            self._extract(scene)
        except Exception:  # pylint: disable=broad-exception-caught
            logging.exception("  Dump failed in '%s'", scene.name)
            self.state.scenes_skipped += 1
            return False
        return True

    def _extract(self, scene: SceneHandle) -> None:
        self._transition(LifecyclePhase.EXTRACTING, "dumping")
        self.records_written = dump_scene(scene, self.sink, self.state)
        self.loaded_scene_name = scene.name
        self.state.dumped_scenes.add(scene.name)
        self.state.scenes_dumped += 1
        logging.info("  Dumped '%s' (%d record(s))", scene.name, self.records_written)
        self.state.set_status("dumped OK")

    def _unload(self, scene: SceneHandle) -> None:
        if not is_resident(scene):
            return
        try:
            operation = self.host.unload_scene_async(scene)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logging.warning("  Unload start threw for '%s': %s", scene.name, exc)
            self.state.set_status("unload fail(start)")
            return
        if operation is None:
            logging.warning("  Unload returned no operation for '%s'", scene.name)
            self.state.set_status("unload null")
            return
        if not wait_for_operation(operation, self.scheduler, self.settings.unload_timeout):
            logging.warning("  Unload timeout '%s', continue.", scene.name)
            self.state.set_status("unload timeout")

    def _restore_original_context(self) -> None:
        original = self.state.original_active_scene
        if not is_resident(original):
            return
        try:
            self.host.set_active_scene(original)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logging.warning("  Could not restore active scene '%s': %s", original.name, exc)
