"""
Process-lifetime entry points: the scan trigger and the passive per-load hook.

The controller owns the bundle enumerator (so its cache outlives single runs),
the one ScanState instance, and the guard that turns a re-trigger during a
running scan into a no-op.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .bundles import BundleEnumerator
from .cleanup import LoadingScreenSweeper
from .config import ScanSettings
from .extractor import dump_scene
from .host import SceneHandle, SceneHost
from .orchestrator import ScanOrchestrator, StatusReporter
from .scheduler import TickScheduler
from .sink import CsvRecordSink
from .state import ScanState


@dataclass(frozen=True)
class ScanComponents:
    """Aggregates the helpers required by SceneDumpController."""

    sink: CsvRecordSink
    orchestrator: ScanOrchestrator
    status_reporter: StatusReporter


class SceneDumpController:
    """Owns the trigger, the passive hook and interruption for one host."""

    def __init__(self, state: ScanState, components: ScanComponents):
        self.state = state
        self.sink = components.sink
        self.orchestrator = components.orchestrator
        self.status_reporter = components.status_reporter
        self._lock = threading.Lock()
        self._scanning = False
        self._worker: Optional[threading.Thread] = None

    @property
    def is_scanning(self) -> bool:
        """True while a run is in progress."""
        return self._scanning

    def _claim_run(self) -> bool:
        with self._lock:
            if self._scanning:
                return False
            self._scanning = True
        self.orchestrator.interrupted = False
        resume_scheduler = getattr(self.orchestrator.scheduler, "resume", None)
        if resume_scheduler is not None:
            resume_scheduler()
        self.state.set_status("Starting scan")
        return True

    def _run_claimed(self) -> ScanState:
        try:
            return self.orchestrator.run()
        finally:
            self._scanning = False

    def trigger(self, background: bool = True) -> bool:
        """Start one full run. Returns False (and does nothing) if one is already running."""
        if not self._claim_run():
            logging.info("Scan already in progress; trigger ignored.")
            return False
        logging.info("Scan triggered. Starting full scan from current state.")
        if not background:
            self._run_claimed()
            return True
        self._worker = threading.Thread(
            target=self._run_claimed, name="scene-dump-scan", daemon=True
        )
        self._worker.start()
        return True

    def run_scan(self) -> ScanState:
        """Run a full scan synchronously; returns the state of that run."""
        self.trigger(background=False)
        return self.state

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for a background run; returns True when no run is left running."""
        worker = self._worker
        if worker is not None:
            worker.join(timeout)
            return not worker.is_alive()
        return True

    def interrupt(self) -> None:
        """Stop the running scan at the next bundle or scene boundary."""
        self.orchestrator.interrupted = True
        interrupt_scheduler = getattr(self.orchestrator.scheduler, "interrupt", None)
        if interrupt_scheduler is not None:
            interrupt_scheduler()

    def on_scene_loaded(self, scene: SceneHandle, *_args) -> None:
        """Passive hook: dump any scene the host loads outside an active run."""
        if self.state.suppress_passive_dump:
            return
        try:
            dump_scene(scene, self.sink, self.state)
            logging.info("(live load) %s dumped.", scene.name)
        except Exception:  # pylint: disable=broad-exception-caught
            logging.exception("Dump failed in live scene %s", scene.name)


def create_controller(
    host: SceneHost,
    settings: ScanSettings,
    scheduler=None,
) -> SceneDumpController:
    """Factory function to create SceneDumpController with all dependencies"""
    if scheduler is None:
        scheduler = TickScheduler(settings.tick_interval)
    state = ScanState()
    sink = CsvRecordSink(settings.dump_path)
    sink.ensure_header()
    enumerator = BundleEnumerator(settings.bundle_root, settings.bundle_extension)
    sweeper = LoadingScreenSweeper(host, settings.loading_screen_patterns)
    orchestrator = ScanOrchestrator(host, scheduler, enumerator, sink, sweeper, state, settings)
    components = ScanComponents(
        sink=sink,
        orchestrator=orchestrator,
        status_reporter=StatusReporter(state),
    )
    controller = SceneDumpController(state, components)
    add_listener = getattr(host, "add_scene_loaded_listener", None)
    if add_listener is not None:
        add_listener(controller.on_scene_loaded)
    logging.info("Scene dump ready. Trigger a scan anytime (best from the title screen).")
    return controller
