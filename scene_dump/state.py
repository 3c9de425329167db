"""Run-scoped scan state owned by the orchestrator."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional

from .host import SceneHandle

IDLE_STATUS = "Idle (waiting for trigger)"


class LifecyclePhase(Enum):
    """Scene lifecycle states"""

    IDLE = "idle"
    LOADING = "loading"
    LOAD_TIMEOUT = "load_timeout"
    LOADED = "loaded"
    EXTRACTING = "extracting"
    UNLOADING = "unloading"
    DONE = "done"
    SKIPPED = "skipped"


class CaseInsensitiveNameSet:
    """Set of names compared case-insensitively, keeping the first spelling seen."""

    def __init__(self, names: Iterable[str] = ()):
        self._names: dict[str, str] = {}
        for name in names:
            self.add(name)

    def add(self, name: str) -> None:
        """Add a name unless an equivalent spelling is already present."""
        self._names.setdefault(name.casefold(), name)

    def clear(self) -> None:
        """Remove all names."""
        self._names.clear()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._names)


@dataclass
class ScanState:  # pylint: disable=too-many-instance-attributes
    """Progress, status and dedup set for one scan run."""

    total_bundles: int = 0
    current_bundle_index: int = 0
    current_bundle_path: str = ""
    current_scene_name: str = ""
    status: str = IDLE_STATUS
    dumped_scenes: CaseInsensitiveNameSet = field(default_factory=CaseInsensitiveNameSet)
    original_active_scene: Optional[SceneHandle] = None
    original_active_scene_name: str = ""
    suppress_passive_dump: bool = False
    scenes_dumped: int = 0
    scenes_skipped: int = 0
    scenes_filtered: int = 0
    scenes_already_dumped: int = 0
    records_written: int = 0
    write_errors: int = 0
    loading_screens_destroyed: int = 0
    started_at: Optional[float] = None

    def reset(self) -> None:
        """Clear everything run-scoped before a new run starts."""
        self.total_bundles = 0
        self.current_bundle_index = 0
        self.current_bundle_path = ""
        self.current_scene_name = ""
        self.dumped_scenes.clear()
        self.original_active_scene = None
        self.original_active_scene_name = ""
        self.scenes_dumped = 0
        self.scenes_skipped = 0
        self.scenes_filtered = 0
        self.scenes_already_dumped = 0
        self.records_written = 0
        self.write_errors = 0
        self.loading_screens_destroyed = 0
        self.started_at = time.monotonic()

    def set_status(self, status: str) -> None:
        """Publish the current human-readable status."""
        self.status = status

    def is_original_scene(self, name: str) -> bool:
        """True when name matches the context active before the run."""
        return bool(self.original_active_scene_name) and (
            name.casefold() == self.original_active_scene_name.casefold()
        )
