"""
Bundle discovery for scene_dump.

Lists bundle files under the bundle root in a stable order and maps the
scene paths a bundle reports to SceneRef entries.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Sequence


class EnumerationError(RuntimeError):
    """Raised when the bundle root is missing or cannot be listed."""

    def __init__(self, message: str, status: str):
        super().__init__(message)
        self.status = status


def scene_name_from_path(path: str) -> str:
    """Return the file name without extension, accepting / and \\ separators."""
    return PurePosixPath(path.replace("\\", "/")).stem


@dataclass(frozen=True)
class SceneRef:
    """A scene reported by a bundle."""

    short_name: str
    full_path: str

    @classmethod
    def from_path(cls, full_path: str) -> "SceneRef":
        """Build a reference whose short name is the path's file stem."""
        return cls(short_name=scene_name_from_path(full_path), full_path=full_path)


def scene_refs_from_paths(paths: Sequence[str] | None) -> list[SceneRef]:
    """Convert the scene paths of a bundle, preserving their order."""
    if not paths:
        return []
    return [SceneRef.from_path(path) for path in paths]


def _bundle_sort_key(path: Path) -> tuple[str, str]:
    text = str(path)
    return text.upper(), text


class BundleEnumerator:
    """Enumerates bundle files once and serves the cached, sorted list afterwards."""

    def __init__(self, root: Path, extension: str = ".bundle"):
        self.root = Path(root)
        self.extension = extension.lower()
        self._cached: tuple[Path, ...] | None = None

    def _walk(self) -> list[Path]:
        found: list[Path] = []

        def _raise(error: OSError) -> None:
            raise error

        for dirpath, _dirnames, filenames in os.walk(self.root, onerror=_raise):
            for filename in filenames:
                if filename.lower().endswith(self.extension):
                    found.append(Path(dirpath) / filename)
        return found

    def list_bundles(self) -> tuple[Path, ...]:
        """Return every bundle under the root, sorted case-insensitively by full path.

        Raises:
            EnumerationError: If the root does not exist or listing fails.
        """
        if not self.root.is_dir():
            raise EnumerationError(f"Bundle root not found: {self.root}", "ERROR: no bundle dir")
        if self._cached is None:
            try:
                found = self._walk()
            except OSError as exc:
                raise EnumerationError(
                    f"Could not list bundles under {self.root}: {exc}", "ERROR: list bundles"
                ) from exc
            self._cached = tuple(sorted(found, key=_bundle_sort_key))
            logging.debug("Enumerated %d bundle(s) under %s", len(self._cached), self.root)
        return self._cached
