"""
Host collaborator protocols.

The scanner never talks to an engine directly; a host binding implements
these protocols (the simulated host in simulated_host.py is one of them).
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Protocol, Sequence


class AsyncOperation(Protocol):
    """Handle for an asynchronous load or unload request."""

    @property
    def is_done(self) -> bool: ...


class HostObject(Protocol):
    """A node of a scene's object graph."""

    name: str
    active: bool

    @property
    def children(self) -> Sequence["HostObject"]: ...

    @property
    def components(self) -> Sequence[object]: ...


class SceneHandle(Protocol):
    """A scene as seen by the host's scene manager."""

    name: str
    path: str

    def is_valid(self) -> bool: ...

    @property
    def is_loaded(self) -> bool: ...

    def root_objects(self) -> Sequence[HostObject]: ...


class BundleHandle(Protocol):
    """An opened resource bundle."""

    def scene_paths(self) -> Sequence[str]: ...

    def release(self) -> None: ...


class SceneHost(Protocol):
    """Operations the scanner consumes from the host environment."""

    def open_bundle(self, path: Path) -> Optional[BundleHandle]: ...

    def load_scene_async(self, name_or_path: str) -> Optional[AsyncOperation]: ...

    def get_scene_by_name(self, name: str) -> SceneHandle: ...

    def get_active_scene(self) -> SceneHandle: ...

    def set_active_scene(self, scene: SceneHandle) -> None: ...

    def unload_scene_async(self, scene: SceneHandle) -> Optional[AsyncOperation]: ...

    def iter_active_root_objects(self) -> Iterable[HostObject]: ...

    def destroy_object(self, obj: HostObject) -> None: ...


def is_resident(scene: SceneHandle | None) -> bool:
    """Return True when the scene handle is valid and fully loaded."""
    return scene is not None and scene.is_valid() and scene.is_loaded
