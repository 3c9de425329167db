"""Offline smoke scan: a sample bundle tree served by the simulated host."""

# pylint: disable=missing-function-docstring

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .config import ScanSettings
from .controller import SceneDumpController, create_controller
from .records import GeoRock, GeoRockData, PersistentBoolItem, PersistentIntItem, PersistentItemData
from .simulated_host import SimulatedHost, SimulatedObject, SimulatedSceneSpec

TITLE_SCENE_PATH = "Assets/Scenes/Menu_Title.unity"
STALLED_LOAD_TICKS = 10_000


class SampleMutator(Enum):
    """Mutator values carried by the sample persistent items."""

    NONE = 0
    RESET_ON_BENCH = 1


@dataclass(frozen=True)
class SmokeResult:
    """What a simulated scan leaves behind."""

    controller: SceneDumpController
    host: SimulatedHost
    settings: ScanSettings


def _bool_item(scene: str, item_id: str, value: bool, semi: bool = False) -> PersistentBoolItem:
    return PersistentBoolItem(PersistentItemData(scene, item_id, value, SampleMutator.NONE, semi))


def _title_scene() -> SimulatedSceneSpec:
    return SimulatedSceneSpec(TITLE_SCENE_PATH, roots=[SimulatedObject("Title_Menu_Canvas")])


def _bellhart_scene() -> SimulatedSceneSpec:
    shrine = SimulatedObject(
        "Shrine",
        components=[
            PersistentIntItem(
                PersistentItemData("Bellhart_01", "shrine_state", 2, SampleMutator.RESET_ON_BENCH, True)
            )
        ],
        active=False,
    )
    town = SimulatedObject(
        "Bellhart_Town",
        children=[
            SimulatedObject("Lever_Gate", components=[_bool_item("Bellhart_01", "lever_gate", True)]),
            shrine,
            SimulatedObject("Geo_Rock_1", components=[GeoRock(GeoRockData("Bellhart_01", "geo_rock_1", 3))]),
        ],
    )
    return SimulatedSceneSpec("Assets/Scenes/Bellhart_01.unity", roots=[town])


def _crossroads_scene() -> SimulatedSceneSpec:
    return SimulatedSceneSpec(
        "Assets/Scenes/Crossroads_04.unity",
        roots=[
            SimulatedObject("Crossroads", components=[_bool_item("Crossroads_04", "gate,left", False)]),
            SimulatedObject("Geo_Rock_Broken", components=[GeoRock(None)]),
        ],
        reject_short_name=True,
        spawns=[SimulatedObject("LoadingScreen_Curtain")],
    )


def _stalled_scene() -> SimulatedSceneSpec:
    return SimulatedSceneSpec("Assets/Scenes/Abyss_Stalled.unity", load_ticks=STALLED_LOAD_TICKS)


def build_sample_host(bundle_root: Path) -> SimulatedHost:
    """Write the sample bundle files under bundle_root and register them with a new host."""
    host = SimulatedHost(_title_scene())
    bellhart = host.add_scene(_bellhart_scene())
    crossroads = host.add_scene(_crossroads_scene())
    stalled = host.add_scene(_stalled_scene())

    bundles = {
        "corrupt_catalog.bundle": ([], {"fail_open": True}),
        "scenes_bellhart.bundle": ([bellhart.path, TITLE_SCENE_PATH], {}),
        "Scenes_Crossroads.bundle": ([bellhart.path, crossroads.path], {}),
        "scenes_stalled.bundle": ([stalled.path], {}),
        "shared/shared_assets.bundle": ([], {}),
    }
    for relative, (scene_paths, flags) in bundles.items():
        path = bundle_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"UnityFS")
        host.add_bundle(path, scene_paths, **flags)
    (bundle_root / "catalog.json").write_text("{}", encoding="utf-8")
    return host


def prepare_simulated_scan(work_dir: Path, dump_path: Optional[Path] = None) -> SmokeResult:
    """Build the sample tree under work_dir and a controller wired to it, without scanning."""
    bundle_root = work_dir / "bundles"
    bundle_root.mkdir(parents=True, exist_ok=True)
    host = build_sample_host(bundle_root)
    settings = ScanSettings(
        bundle_root=bundle_root,
        dump_path=dump_path or work_dir / "AllSceneDataDump.csv",
    )
    controller = create_controller(host, settings, scheduler=host.scheduler)
    return SmokeResult(controller=controller, host=host, settings=settings)


def run_simulated_scan(work_dir: Path, dump_path: Optional[Path] = None) -> SmokeResult:
    """Run one full scan of the sample tree under work_dir."""
    result = prepare_simulated_scan(work_dir, dump_path)
    result.controller.run_scan()
    return result
