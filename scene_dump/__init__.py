"""
Scene data dump package.

Walk every scene bundle of the game, load each scene into the running host,
and append its persistent-state records to a CSV file.
"""

from . import args_parser, bundles, cleanup, config, controller, danger_filter, extractor, records, sink
from .bundles import BundleEnumerator, EnumerationError, SceneRef
from .config import ConfigurationError, ScanSettings, load_settings
from .controller import SceneDumpController, create_controller
from .records import GeoRock, PersistentBoolItem, PersistentIntItem, Record
from .state import LifecyclePhase, ScanState

__all__ = [
    "BundleEnumerator",
    "ConfigurationError",
    "EnumerationError",
    "GeoRock",
    "LifecyclePhase",
    "PersistentBoolItem",
    "PersistentIntItem",
    "Record",
    "ScanSettings",
    "ScanState",
    "SceneDumpController",
    "SceneRef",
    "args_parser",
    "bundles",
    "cleanup",
    "config",
    "controller",
    "create_controller",
    "danger_filter",
    "extractor",
    "load_settings",
    "records",
    "sink",
]
