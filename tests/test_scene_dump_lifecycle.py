"""Tests for scene_dump/lifecycle.py

Tests cover:
- Successful load → extract → unload with context restore
- Fallback from short-name to full-path loads
- Load start failures, load timeouts and unresolved scenes
- Unload failures and the never-unload-the-original-context rule
"""

import logging
from unittest import mock

import pytest

from scene_dump.bundles import SceneRef
from scene_dump.lifecycle import SceneLifecycle
from scene_dump.records import PersistentBoolItem, PersistentItemData
from scene_dump.simulated_host import SimulatedHost, SimulatedObject, SimulatedScene, SimulatedSceneSpec
from scene_dump.sink import CsvRecordSink
from scene_dump.state import LifecyclePhase, ScanState
from tests.assertions import assert_equal, read_dump_rows

ROOM_PATH = "Assets/Scenes/Room_01.unity"


def _room(**overrides):
    item = PersistentBoolItem(PersistentItemData("Room_01", "lever", True, None, False))
    return SimulatedSceneSpec(ROOM_PATH, roots=[SimulatedObject("Room", components=[item])], **overrides)


def _lifecycle(host, settings, scene_path=ROOM_PATH):
    state = ScanState()
    state.reset()
    original = host.get_active_scene()
    state.original_active_scene = original
    state.original_active_scene_name = original.name
    sink = CsvRecordSink(settings.dump_path)
    sink.ensure_header()
    return SceneLifecycle(host, host.scheduler, sink, state, settings, SceneRef.from_path(scene_path))


class TestSuccessfulLifecycle:
    """Tests for the happy path"""

    def test_load_extract_unload(self, host, settings, dump_path):
        """Records are written, the scene is unloaded and dedup remembers it"""
        host.add_scene(_room())
        lifecycle = _lifecycle(host, settings)

        phase = lifecycle.run()

        assert_equal(phase, LifecyclePhase.DONE)
        assert_equal(lifecycle.records_written, 1)
        assert_equal(lifecycle.loaded_scene_name, "Room_01")
        assert_equal(read_dump_rows(dump_path), [["persistentBool", "Room_01", "lever", "True", "", "False", "Room_01"]])
        assert "room_01" in lifecycle.state.dumped_scenes
        assert_equal(lifecycle.state.scenes_dumped, 1)
        assert not host.is_scene_loaded("Room_01")
        assert_equal(host.unload_counts["Room_01"], 1)

    def test_original_context_is_restored(self, host, settings):
        """The active scene is set back to the pre-run context and a settle delay follows"""
        host.add_scene(_room())
        lifecycle = _lifecycle(host, settings)
        lifecycle.run()
        assert_equal(host.active_scene_name, "Menu_Title")
        assert_equal(host.set_active_calls, 1)
        assert_equal(host.scheduler.delays, [settings.settle_delay, settings.settle_delay])

    def test_falls_back_to_full_path(self, host, settings):
        """A rejected short-name load is retried with the full path"""
        host.add_scene(_room(reject_short_name=True))
        lifecycle = _lifecycle(host, settings)

        assert_equal(lifecycle.run(), LifecyclePhase.DONE)
        assert_equal(host.load_requests, ["Room_01", ROOM_PATH])

    def test_original_context_is_never_unloaded(self, settings, dump_path):
        """Visiting the scene that was active at run start extracts it but keeps it loaded"""
        start = _room()
        host = SimulatedHost(start)
        lifecycle = _lifecycle(host, settings)

        assert_equal(lifecycle.run(), LifecyclePhase.DONE)
        assert host.is_scene_loaded("Room_01")
        assert_equal(host.unload_counts["Room_01"], 0)
        assert_equal(len(read_dump_rows(dump_path)), 1)


class TestLoadFailures:
    """Tests for load start failures and timeouts"""

    @pytest.mark.parametrize("spec_overrides", [{"reject_loads": True}, None])
    def test_load_start_failure_skips(self, host, settings, dump_path, spec_overrides):
        """If neither name nor path starts a load the scene is skipped"""
        if spec_overrides is not None:
            host.add_scene(_room(**spec_overrides))
        lifecycle = _lifecycle(host, settings)

        assert_equal(lifecycle.run(), LifecyclePhase.SKIPPED)
        assert_equal(lifecycle.state.status, "load failed(start)")
        assert_equal(lifecycle.state.scenes_skipped, 1)
        assert_equal(host.load_requests, ["Room_01", ROOM_PATH])
        assert_equal(read_dump_rows(dump_path), [])
        assert_equal(host.scheduler.delays, [])

    def test_load_timeout_yields_no_records(self, host, settings, dump_path, caplog):
        """A load that outlives the timeout is abandoned without extraction"""
        host.add_scene(_room(load_ticks=10_000))
        lifecycle = _lifecycle(host, settings)

        with caplog.at_level(logging.WARNING):
            phase = lifecycle.run()

        assert_equal(phase, LifecyclePhase.SKIPPED)
        assert_equal(lifecycle.state.status, "load timeout")
        assert_equal(read_dump_rows(dump_path), [])
        assert "Room_01" not in lifecycle.state.dumped_scenes
        assert host.tick_count < 10_000
        assert host.tick_count * settings.tick_interval >= settings.load_timeout
        assert "Load timeout 'Room_01'" in caplog.text

    def test_abandoned_load_can_still_complete(self, host, settings):
        """Timeouts are advisory: the host may finish the load after the scan moved on"""
        host.add_scene(_room(load_ticks=200))
        _lifecycle(host, settings).run()
        assert not host.is_scene_loaded("Room_01")

        host.run_ticks(200)

        assert host.is_scene_loaded("Room_01")

    def test_unresolved_scene_skips_after_settling(self, host, settings):
        """A finished load whose scene cannot be found is skipped"""
        host.add_scene(_room())
        lifecycle = _lifecycle(host, settings)
        with mock.patch.object(host, "get_scene_by_name", return_value=SimulatedScene(host, "Nowhere")):
            phase = lifecycle.run()

        assert_equal(phase, LifecyclePhase.SKIPPED)
        assert_equal(lifecycle.state.status, "not loaded?")
        assert_equal(lifecycle.state.scenes_skipped, 1)
        assert_equal(host.scheduler.delays, [settings.settle_delay, settings.settle_delay])


    def test_extraction_failure_still_unloads(self, host, settings, dump_path, caplog):
        """A scene whose hierarchy throws is skipped but still unloaded"""
        host.add_scene(_room())
        lifecycle = _lifecycle(host, settings)
        with mock.patch.object(SimulatedScene, "root_objects", side_effect=RuntimeError("torn down")):
            with caplog.at_level(logging.ERROR):
                phase = lifecycle.run()

        assert_equal(phase, LifecyclePhase.SKIPPED)
        assert_equal(lifecycle.state.status, "scene error")
        assert_equal(lifecycle.state.scenes_skipped, 1)
        assert_equal(lifecycle.state.scenes_dumped, 0)
        assert_equal(read_dump_rows(dump_path), [])
        assert_equal(host.unload_counts["Room_01"], 1)
        assert "Dump failed in 'Room_01'" in caplog.text


class TestUnloadFailures:
    """Tests for unload problems, which never undo the extraction"""

    def test_unload_start_failure(self, host, settings, dump_path):
        """A throwing unload is reported and the records stay written"""
        host.add_scene(_room(fail_unload_start=True))
        lifecycle = _lifecycle(host, settings)

        assert_equal(lifecycle.run(), LifecyclePhase.DONE)
        assert_equal(lifecycle.state.status, "unload fail(start)")
        assert_equal(len(read_dump_rows(dump_path)), 1)

    def test_unload_returning_nothing(self, host, settings):
        """An unload that returns no operation is reported as null"""
        host.add_scene(_room())
        lifecycle = _lifecycle(host, settings)
        with mock.patch.object(host, "unload_scene_async", return_value=None):
            assert_equal(lifecycle.run(), LifecyclePhase.DONE)
        assert_equal(lifecycle.state.status, "unload null")

    def test_unload_timeout(self, host, settings):
        """A slow unload times out and the lifecycle still finishes"""
        host.add_scene(_room(unload_ticks=10_000))
        lifecycle = _lifecycle(host, settings)

        assert_equal(lifecycle.run(), LifecyclePhase.DONE)
        assert_equal(lifecycle.state.status, "unload timeout")
        assert_equal(lifecycle.state.scenes_dumped, 1)

    def test_restore_failure_is_logged(self, host, settings, caplog):
        """A failing context restore does not raise"""
        host.add_scene(_room())
        lifecycle = _lifecycle(host, settings)
        with mock.patch.object(host, "set_active_scene", side_effect=ValueError("gone")):
            with caplog.at_level(logging.WARNING):
                assert_equal(lifecycle.run(), LifecyclePhase.DONE)
        assert "Could not restore active scene 'Menu_Title': gone" in caplog.text
