"""
Record model and the closed set of record-provider components.

A scene's object graph carries three kinds of persistent-state components.
Each maps its own payload to a Record; the extractor only pattern-matches
against RECORD_PROVIDER_TYPES.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass
from enum import Enum
from typing import Optional


class RecordCategory(Enum):
    """Categories written to the Category column"""

    PERSISTENT_BOOL = "persistentBool"
    PERSISTENT_INT = "persistentInt"
    GEO_ROCK = "geoRock"


@dataclass(frozen=True)
class Record:  # pylint: disable=too-many-instance-attributes
    """One extracted persistent-state fact, in output column order."""

    category: str
    scene_name_in_data: str
    id: str  # pylint: disable=invalid-name
    value: str
    mutator: str
    is_semi_persistent: str
    loaded_scene_name: str

    def fields(self) -> tuple[str, ...]:
        """Return the seven column values in output order."""
        return astuple(self)


def to_text(value: object) -> str:
    """Stringify a payload value the way the save data spells it."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.name
    return str(value)


@dataclass(frozen=True)
class PersistentItemData:
    """Payload of a persistent bool/int item."""

    scene_name: str
    id: str  # pylint: disable=invalid-name
    value: object
    mutator: object
    is_semi_persistent: bool


@dataclass(frozen=True)
class GeoRockData:
    """Payload of a breakable rock."""

    scene_name: str
    id: str  # pylint: disable=invalid-name
    hits_left: int


class RecordProvider:
    """Base for components that carry a persistent-state payload."""

    category: RecordCategory
    label: str = "Provider"

    def to_record(self, loaded_scene_name: str) -> Optional[Record]:
        """Map the payload to a Record, or None when there is no payload."""
        raise NotImplementedError


class _PersistentItem(RecordProvider):
    def __init__(self, item_data: Optional[PersistentItemData]):
        self._item_data = item_data

    @property
    def item_data(self) -> Optional[PersistentItemData]:
        """The payload as stored on the component."""
        return self._item_data

    def to_record(self, loaded_scene_name: str) -> Optional[Record]:
        data = self.item_data
        if data is None:
            return None
        return Record(
            category=self.category.value,
            scene_name_in_data=to_text(data.scene_name),
            id=to_text(data.id),
            value=to_text(data.value),
            mutator=to_text(data.mutator),
            is_semi_persistent=to_text(data.is_semi_persistent),
            loaded_scene_name=loaded_scene_name,
        )


class PersistentBoolItem(_PersistentItem):
    """Boolean persistent item (opened doors, collected pickups, ...)."""

    category = RecordCategory.PERSISTENT_BOOL
    label = "BoolItem"


class PersistentIntItem(_PersistentItem):
    """Integer persistent item (counters, multi-state switches, ...)."""

    category = RecordCategory.PERSISTENT_INT
    label = "IntItem"


class GeoRock(RecordProvider):
    """Breakable rock that remembers how many hits it has left."""

    category = RecordCategory.GEO_ROCK
    label = "GeoRock"

    def __init__(self, geo_rock_data: Optional[GeoRockData]):
        self._geo_rock_data = geo_rock_data

    @property
    def geo_rock_data(self) -> Optional[GeoRockData]:
        """The payload as stored on the component."""
        return self._geo_rock_data

    def to_record(self, loaded_scene_name: str) -> Optional[Record]:
        data = self.geo_rock_data
        if data is None:
            return None
        return Record(
            category=self.category.value,
            scene_name_in_data=to_text(data.scene_name),
            id=to_text(data.id),
            value=to_text(data.hits_left),
            mutator="",
            is_semi_persistent="",
            loaded_scene_name=loaded_scene_name,
        )


RECORD_PROVIDER_TYPES = (PersistentBoolItem, PersistentIntItem, GeoRock)
