"""
Loading-screen sweep between scenes.

The host keeps engine-managed loading curtains and fade overlays alive across
scene loads. Their exact type is unknown, so any active root whose name
contains one of the configured fragments is destroyed. This can also hit
unrelated objects with matching names.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .host import SceneHost


class LoadingScreenSweeper:  # pylint: disable=too-few-public-methods
    """Destroys active root objects that look like stuck loading overlays."""

    def __init__(self, host: SceneHost, patterns: Iterable[str]):
        self.host = host
        self.patterns = tuple(pattern.lower() for pattern in patterns)

    def matches(self, name: str) -> bool:
        """True when the object name contains any configured fragment."""
        lowered = name.lower()
        return any(pattern in lowered for pattern in self.patterns)

    def sweep(self) -> list[str]:
        """Destroy matching roots; return the names destroyed. Never raises."""
        destroyed: list[str] = []
        try:
            suspects = [
                obj
                for obj in self.host.iter_active_root_objects()
                if obj.active and self.matches(obj.name)
            ]
            for obj in suspects:
                logging.info("Cleanup: destroying possible loading screen object '%s'", obj.name)
                self.host.destroy_object(obj)
                destroyed.append(obj.name)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logging.warning("Loading screen cleanup error: %s", exc)
        return destroyed
