"""In-memory host used by the offline smoke scan and the test-suite."""

# pylint: disable=missing-function-docstring,too-many-instance-attributes

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional

from .bundles import scene_name_from_path


@dataclass(eq=False)
class SimulatedObject:
    """Object graph node; compared by identity."""

    name: str
    components: list = field(default_factory=list)
    children: list["SimulatedObject"] = field(default_factory=list)
    active: bool = True


@dataclass(eq=False)
class SimulatedSceneSpec:
    """How a scene behaves when the scanner loads and unloads it."""

    path: str
    roots: list[SimulatedObject] = field(default_factory=list)
    load_ticks: int = 2
    unload_ticks: int = 1
    reject_short_name: bool = False
    reject_loads: bool = False
    fail_unload_start: bool = False
    spawns: list[SimulatedObject] = field(default_factory=list)

    @property
    def name(self) -> str:
        return scene_name_from_path(self.path)


class SimulatedOperation:
    """Async load/unload that completes after a number of ticks."""

    def __init__(self, ticks: int, on_complete: Callable[[], None]):
        self.remaining_ticks = ticks
        self._on_complete = on_complete
        self.is_done = False
        if ticks <= 0:
            self._finish()

    def _finish(self) -> None:
        self.is_done = True
        self._on_complete()

    def advance(self) -> None:
        if self.is_done:
            return
        self.remaining_ticks -= 1
        if self.remaining_ticks <= 0:
            self._finish()


class SimulatedScene:
    """Scene handle returned by the simulated scene manager."""

    def __init__(self, host: "SimulatedHost", name: str, path: str = ""):
        self._host = host
        self.name = name
        self.path = path

    def is_valid(self) -> bool:
        return self._host.is_scene_loaded(self.name)

    @property
    def is_loaded(self) -> bool:
        return self._host.is_scene_loaded(self.name)

    def root_objects(self) -> list[SimulatedObject]:
        return self._host.roots_of(self.name)


class SimulatedBundle:
    """Opened bundle that reports a fixed list of scene paths."""

    def __init__(self, host: "SimulatedHost", path: str, scene_paths: list[str], fail_listing: bool):
        self._host = host
        self.path = path
        self._scene_paths = scene_paths
        self._fail_listing = fail_listing

    def scene_paths(self) -> list[str]:
        if self._fail_listing:
            raise RuntimeError(f"cannot read scene table of {self.path}")
        return list(self._scene_paths)

    def release(self) -> None:
        self._host.released_bundles.append(self.path)


@dataclass
class _BundleSpec:
    scene_paths: list[str]
    fail_open: bool = False
    returns_none: bool = False
    fail_listing: bool = False


class SimulatedScheduler:
    """Virtual clock: every tick advances the simulated host by one frame."""

    def __init__(self, host: "SimulatedHost", tick_interval: float):
        self.host = host
        self.tick_interval = tick_interval
        self.delays: list[float] = []

    def now(self) -> float:
        return self.host.tick_count * self.tick_interval

    def next_tick(self) -> None:
        self.host.advance_tick()

    def delay(self, seconds: float) -> None:
        self.delays.append(seconds)
        if seconds <= 0:
            return
        for _ in range(max(1, math.ceil(seconds / self.tick_interval - 1e-9))):
            self.host.advance_tick()


class SimulatedHost:
    """Scene manager, bundle loader and object registry kept in memory."""

    def __init__(self, start_scene: SimulatedSceneSpec, tick_interval: float = 1 / 60):
        self.tick_count = 0
        self.scheduler = SimulatedScheduler(self, tick_interval)
        self._specs: dict[str, SimulatedSceneSpec] = {}
        self._bundles: dict[str, _BundleSpec] = {}
        self._loaded: dict[str, SimulatedSceneSpec] = {}
        self._pending: list[SimulatedOperation] = []
        self._listeners: list[Callable[[SimulatedScene], None]] = []
        self.persistent_objects: list[SimulatedObject] = []
        self.load_requests: list[str] = []
        self.load_counts: Counter = Counter()
        self.unload_counts: Counter = Counter()
        self.released_bundles: list[str] = []
        self.destroyed: list[str] = []
        self.set_active_calls = 0
        self.add_scene(start_scene)
        self._loaded[start_scene.name.casefold()] = start_scene
        self._active_name = start_scene.name

    # -- setup -------------------------------------------------------------

    def add_scene(self, spec: SimulatedSceneSpec) -> SimulatedSceneSpec:
        self._specs[spec.name.casefold()] = spec
        return spec

    def add_bundle(  # pylint: disable=too-many-arguments
        self,
        path: Path,
        scene_paths: list[str],
        *,
        fail_open: bool = False,
        returns_none: bool = False,
        fail_listing: bool = False,
    ) -> None:
        self._bundles[str(path)] = _BundleSpec(list(scene_paths), fail_open, returns_none, fail_listing)

    def add_scene_loaded_listener(self, listener: Callable[[SimulatedScene], None]) -> None:
        self._listeners.append(listener)

    # -- frame loop ----------------------------------------------------------

    def advance_tick(self) -> None:
        self.tick_count += 1
        for operation in list(self._pending):
            operation.advance()
            if operation.is_done:
                self._pending.remove(operation)

    def run_ticks(self, count: int) -> None:
        for _ in range(count):
            self.advance_tick()

    # -- queries used by tests ----------------------------------------------

    def is_scene_loaded(self, name: str) -> bool:
        return name.casefold() in self._loaded

    def roots_of(self, name: str) -> list[SimulatedObject]:
        spec = self._loaded.get(name.casefold())
        return list(spec.roots) if spec is not None else []

    @property
    def active_scene_name(self) -> str:
        return self._active_name

    # -- host protocol ---------------------------------------------------------

    def open_bundle(self, path: Path) -> Optional[SimulatedBundle]:
        spec = self._bundles.get(str(path))
        if spec is None or spec.returns_none:
            return None
        if spec.fail_open:
            raise OSError(f"corrupt bundle {path}")
        return SimulatedBundle(self, str(path), spec.scene_paths, spec.fail_listing)

    def _find_spec(self, name_or_path: str) -> Optional[SimulatedSceneSpec]:
        spec = self._specs.get(name_or_path.casefold())
        if spec is not None:
            return spec
        for candidate in self._specs.values():
            if candidate.path == name_or_path:
                return candidate
        return None

    def load_scene_async(self, name_or_path: str) -> Optional[SimulatedOperation]:
        self.load_requests.append(name_or_path)
        spec = self._find_spec(name_or_path)
        if spec is None:
            return None
        if spec.reject_loads:
            raise RuntimeError(f"scene {name_or_path} is not in build settings")
        if spec.reject_short_name and name_or_path != spec.path:
            raise RuntimeError(f"scene {name_or_path} must be loaded by path")
        operation = SimulatedOperation(spec.load_ticks, lambda: self._complete_load(spec))
        if not operation.is_done:
            self._pending.append(operation)
        return operation

    def _complete_load(self, spec: SimulatedSceneSpec) -> None:
        self._loaded[spec.name.casefold()] = spec
        self.load_counts[spec.name] += 1
        self.persistent_objects.extend(spec.spawns)
        handle = SimulatedScene(self, spec.name, spec.path)
        for listener in list(self._listeners):
            listener(handle)

    def get_scene_by_name(self, name: str) -> SimulatedScene:
        spec = self._specs.get(name.casefold())
        if spec is None:
            return SimulatedScene(self, name)
        return SimulatedScene(self, spec.name, spec.path)

    def get_active_scene(self) -> SimulatedScene:
        return self.get_scene_by_name(self._active_name)

    def set_active_scene(self, scene: SimulatedScene) -> None:
        if not self.is_scene_loaded(scene.name):
            raise ValueError(f"scene {scene.name} is not loaded")
        self._active_name = scene.name
        self.set_active_calls += 1

    def unload_scene_async(self, scene: SimulatedScene) -> Optional[SimulatedOperation]:
        spec = self._loaded.get(scene.name.casefold())
        if spec is None:
            return None
        if spec.fail_unload_start:
            raise RuntimeError(f"scene {scene.name} cannot be unloaded")
        operation = SimulatedOperation(spec.unload_ticks, lambda: self._complete_unload(spec))
        if not operation.is_done:
            self._pending.append(operation)
        return operation

    def _complete_unload(self, spec: SimulatedSceneSpec) -> None:
        self._loaded.pop(spec.name.casefold(), None)
        self.unload_counts[spec.name] += 1

    def iter_active_root_objects(self) -> Iterator[SimulatedObject]:
        for spec in list(self._loaded.values()):
            for root in spec.roots:
                if root.active:
                    yield root
        for obj in list(self.persistent_objects):
            if obj.active:
                yield obj

    def destroy_object(self, obj: SimulatedObject) -> None:
        if obj in self.persistent_objects:
            self.persistent_objects.remove(obj)
        for spec in self._loaded.values():
            if obj in spec.roots:
                spec.roots.remove(obj)
        self.destroyed.append(obj.name)
