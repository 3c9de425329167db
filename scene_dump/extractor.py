"""
Record extraction from a loaded scene.

Walks every root of the scene depth-first, inactive nodes included, and maps
each record-provider component it finds to a Record. A provider that fails to
read is logged and skipped so the rest of the scene still gets dumped.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterator, Optional

from .host import HostObject, SceneHandle
from .records import RECORD_PROVIDER_TYPES, Record, RecordCategory, RecordProvider
from .sink import CsvRecordSink, RecordWriteError
from .state import ScanState


def iter_subtree_providers(root: HostObject) -> Iterator[RecordProvider]:
    """Yield record providers under root in depth-first pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        for component in node.components:
            if isinstance(component, RECORD_PROVIDER_TYPES):
                yield component
        stack.extend(reversed(list(node.children)))


def iter_record_providers(scene: SceneHandle) -> Iterator[RecordProvider]:
    """Yield every record provider of the scene, root by root."""
    for root in scene.root_objects():
        yield from iter_subtree_providers(root)


def iter_scene_records(scene: SceneHandle) -> Iterator[Record]:
    """Lazily produce the records of a loaded scene."""
    scene_name = scene.name
    seen: Counter = Counter()
    for provider in iter_record_providers(scene):
        seen[provider.category] += 1
        try:
            record = provider.to_record(scene_name)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logging.warning("%s err in %s: %s", provider.label, scene_name, exc)
            continue
        if record is None:
            logging.warning("%s null data in %s", provider.label, scene_name)
            continue
        yield record
    logging.info(
        "%s: %d bools, %d ints, %d rocks.",
        scene_name,
        seen[RecordCategory.PERSISTENT_BOOL],
        seen[RecordCategory.PERSISTENT_INT],
        seen[RecordCategory.GEO_ROCK],
    )


def dump_scene(scene: SceneHandle, sink: CsvRecordSink, state: Optional[ScanState] = None) -> int:
    """Append every record of the scene to the sink; return how many were written."""
    written = 0
    for record in iter_scene_records(scene):
        try:
            sink.append(record)
        except RecordWriteError as exc:
            logging.error(
                "CSV write fail for %s in %s: %s", record.id, record.loaded_scene_name, exc
            )
            if state is not None:
                state.write_errors += 1
                state.set_status("CSV write error")
            continue
        written += 1
    if state is not None:
        state.records_written += written
    return written
