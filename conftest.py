"""Pytest configuration and shared fixtures for the scene data dump scanner."""

# pylint: disable=wrong-import-position

import sys
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from scene_dump.config import ScanSettings
from scene_dump.simulated_host import SimulatedHost, SimulatedObject, SimulatedSceneSpec

SCANNER_ENV_VARS = (
    "SCENE_DUMP_GAME_ROOT",
    "SCENE_DUMP_BUNDLE_ROOT",
    "SCENE_DUMP_OUTPUT",
    "SCENE_DUMP_CLEANUP_PATTERNS",
)


@pytest.fixture(autouse=True)
def isolated_scanner_env(tmp_path, monkeypatch):
    """Auto-use fixture that points SCENE_DUMP_ENV_FILE at an empty .env file.

    Keeps the developer's ~/.env and shell exports out of every test; tests
    that need a variable set it through monkeypatch.
    """
    env_file = tmp_path / ".env"
    env_file.write_text("")
    monkeypatch.setenv("SCENE_DUMP_ENV_FILE", str(env_file))
    for name in SCANNER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield str(env_file)


@pytest.fixture(name="mock_print")
def fixture_mock_print(monkeypatch):
    """Patch builtins.print and return the mock for assertions."""
    patched = mock.Mock()
    monkeypatch.setattr("builtins.print", patched)
    return patched


@pytest.fixture(name="bundle_root")
def fixture_bundle_root(tmp_path):
    """Empty bundle folder inside the test's temporary directory."""
    root = tmp_path / "bundles"
    root.mkdir()
    return root


@pytest.fixture(name="dump_path")
def fixture_dump_path(tmp_path):
    """Path of the CSV file scans append to."""
    return tmp_path / "AllSceneDataDump.csv"


@pytest.fixture(name="settings")
def fixture_settings(bundle_root, dump_path):
    """ScanSettings with the default timings, pointed at the temporary folders."""
    return ScanSettings(bundle_root=bundle_root, dump_path=dump_path)


@pytest.fixture(name="host")
def fixture_host():
    """Simulated host that starts in a title scene."""
    title = SimulatedSceneSpec(
        "Assets/Scenes/Menu_Title.unity", roots=[SimulatedObject("Title_Menu_Canvas")]
    )
    return SimulatedHost(title)
