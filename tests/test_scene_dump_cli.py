"""Tests for scene_dump/cli.py, scene_dump/args_parser.py and scene_dump/smoke.py"""

import signal
import sys
from unittest import mock

import pytest

import config as config_module
from scene_dump.args_parser import parse_args
from scene_dump.cli import main
from scene_dump.smoke import run_simulated_scan
from tests.assertions import assert_equal, read_dump_rows


@pytest.fixture(autouse=True)
def no_local_game_root(monkeypatch):
    """Ignore any GAME_ROOT_PATH a developer set in config_local.py"""
    monkeypatch.setattr(config_module, "GAME_ROOT_PATH", None)


def _printed(mock_print):
    return [call.args[0] if call.args else "" for call in mock_print.call_args_list]


class TestParseArgs:
    """Tests for argument parsing"""

    def test_paths_are_expanded(self, tmp_path):
        """Path options become Path objects"""
        args = parse_args(["bundles", "--bundle-root", str(tmp_path), "--verbose"])
        assert_equal(args.command, "bundles")
        assert_equal(args.bundle_root, tmp_path)
        assert args.verbose
        assert args.output is None

    def test_unknown_command_is_rejected(self):
        """Only the known commands are accepted"""
        with pytest.raises(SystemExit):
            parse_args(["scan-everything"])

    def test_output_directory_is_rejected(self, tmp_path):
        """--output must name a file"""
        with pytest.raises(SystemExit):
            parse_args(["simulate", "--output", str(tmp_path)])


class TestBundlesCommand:
    """Tests for the bundles command"""

    def test_lists_bundles(self, bundle_root, dump_path, mock_print):
        """Bundles are printed in scan order followed by a summary"""
        (bundle_root / "b.bundle").write_bytes(b"")
        (bundle_root / "A.bundle").write_bytes(b"")

        exit_code = main(["bundles", "--bundle-root", str(bundle_root), "--output", str(dump_path)])

        assert_equal(exit_code, 0)
        printed = _printed(mock_print)
        assert_equal(printed[:2], [bundle_root / "A.bundle", bundle_root / "b.bundle"])
        assert f"\n2 bundle(s) under {bundle_root}" in printed
        assert not dump_path.exists()

    def test_missing_bundle_root(self, tmp_path, mock_print):
        """A missing bundle folder is reported with exit code 1"""
        exit_code = main(["bundles", "--bundle-root", str(tmp_path / "missing"), "--output", str(tmp_path / "o.csv")])
        assert_equal(exit_code, 1)
        mock_print.assert_not_called()

    def test_missing_configuration(self, mock_print, caplog):
        """Without any game root the command fails with exit code 1"""
        assert_equal(main(["bundles"]), 1)
        mock_print.assert_not_called()
        assert "Configuration incomplete:" in caplog.text
        assert "Traceback" not in caplog.text

    def test_empty_argv_is_not_replaced_by_sys_argv(self, mock_print):
        """An explicit empty argument list is parsed as given"""
        with mock.patch.object(sys, "argv", ["scene-dump", "bundles"]):
            with pytest.raises(SystemExit):
                main([])
        mock_print.assert_not_called()


class TestSimulateCommand:
    """Tests for the simulate command"""

    def test_simulate_writes_dump_and_restores_sigint(self, tmp_path, mock_print):
        """The smoke scan completes, writes the CSV and leaves SIGINT handling as it was"""
        output = tmp_path / "smoke.csv"
        before = signal.getsignal(signal.SIGINT)
        with mock.patch("scene_dump.cli.tempfile.mkdtemp", return_value=str(tmp_path / "work")):
            exit_code = main(["simulate", "--output", str(output)])

        assert_equal(exit_code, 0)
        assert_equal(len(read_dump_rows(output)), 4)
        assert signal.getsignal(signal.SIGINT) is before
        assert f"Records appended to {output}" in _printed(mock_print)


class TestSmokeScan:
    """Tests for the sample world used by the smoke scan"""

    def test_sample_world_outcome(self, tmp_path):
        """Every failure path of the sample world is stepped over"""
        result = run_simulated_scan(tmp_path)
        state = result.controller.state

        assert_equal(state.status, "Full scan complete")
        assert_equal(state.total_bundles, 5)
        assert_equal(state.scenes_dumped, 2)
        assert_equal(state.scenes_skipped, 1)
        assert_equal(state.scenes_filtered, 1)
        assert_equal(state.scenes_already_dumped, 1)
        assert_equal(state.records_written, 4)
        assert_equal(state.loading_screens_destroyed, 1)
        assert_equal(result.host.active_scene_name, "Menu_Title")

    def test_sample_rows(self, tmp_path):
        """Rows come out per scene in traversal order with commas replaced"""
        result = run_simulated_scan(tmp_path)
        rows = read_dump_rows(result.settings.dump_path)
        assert_equal(
            rows,
            [
                ["persistentBool", "Bellhart_01", "lever_gate", "True", "NONE", "False", "Bellhart_01"],
                ["persistentInt", "Bellhart_01", "shrine_state", "2", "RESET_ON_BENCH", "True", "Bellhart_01"],
                ["geoRock", "Bellhart_01", "geo_rock_1", "3", "", "", "Bellhart_01"],
                ["persistentBool", "Crossroads_04", "gate;left", "False", "NONE", "False", "Crossroads_04"],
            ],
        )
