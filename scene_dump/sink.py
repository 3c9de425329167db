"""
CSV output for scene_dump.

The dump file is append-only: one line per record, commas inside values
replaced by semicolons, nothing quoted or escaped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .records import Record

CSV_HEADER: tuple[str, ...] = (
    "Category",
    "SceneNameSaveFile",
    "ID",
    "Value",
    "Mutator",
    "IsSemiPersistent",
    "LoadedUnityScene",
)


class RecordWriteError(OSError):
    """Raised when a record line cannot be appended to the dump file."""


def sanitize_field(value: str | None) -> str:
    """Replace the delimiter inside a value; None becomes empty."""
    if not value:
        return ""
    return value.replace(",", ";")


def format_row(record: Record) -> str:
    """Serialize a record as one newline-terminated line."""
    return ",".join(sanitize_field(value) for value in record.fields()) + "\n"


class CsvRecordSink:
    """Appends records to the dump file, one independent write per record."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def ensure_header(self) -> bool:
        """Create the file with its header line if it does not exist yet.

        Returns True when the file was created.
        """
        if self.path.exists():
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(",".join(CSV_HEADER) + "\n")
        logging.info("Created dump file %s", self.path)
        return True

    def append(self, record: Record) -> None:
        """Append one record.

        Raises:
            RecordWriteError: If the line cannot be written.
        """
        try:
            payload = format_row(record).encode("utf-8")
            with self.path.open("ab") as handle:
                handle.write(payload)
        except (OSError, ValueError) as exc:
            raise RecordWriteError(f"Could not append to {self.path}: {exc}") from exc
