"""
Configuration for the scene data dump scanner.

Scan pacing:
- Loads and unloads are abandoned after a fixed wall-clock timeout
- Scenes get one extra tick plus a short settle delay after loading
- Short pauses between scenes and bundles leave host frames free for rendering
"""

__all__ = [
    "GAME_ROOT_PATH",
    "GAME_DATA_DIRNAME",
    "BUNDLE_RELATIVE_PATH",
    "BUNDLE_EXTENSION",
    "DUMP_FILENAME",
    "LOAD_TIMEOUT_SECONDS",
    "UNLOAD_TIMEOUT_SECONDS",
    "SETTLE_DELAY_SECONDS",
    "SCENE_PACING_SECONDS",
    "BUNDLE_PACING_SECONDS",
    "TICK_INTERVAL_SECONDS",
    "LOADING_SCREEN_PATTERNS",
]

# Game installation root (folder holding the executable and the dump CSV)
# Set this in config_local.py (not committed to git) or via SCENE_DUMP_GAME_ROOT
try:
    from config_local import GAME_ROOT_PATH
except ImportError:
    GAME_ROOT_PATH = None

# Unity data folder and the addressables bundle folder inside it
GAME_DATA_DIRNAME: str = "Hollow Knight Silksong_Data"
BUNDLE_RELATIVE_PATH: tuple[str, ...] = ("StreamingAssets", "aa", "StandaloneWindows64")
BUNDLE_EXTENSION: str = ".bundle"

# Output file, written next to the game executable
DUMP_FILENAME: str = "AllSceneDataDump.csv"

# Scene lifecycle timing
LOAD_TIMEOUT_SECONDS: float = 2.0
UNLOAD_TIMEOUT_SECONDS: float = 2.0
SETTLE_DELAY_SECONDS: float = 0.05
SCENE_PACING_SECONDS: float = 0.05
BUNDLE_PACING_SECONDS: float = 0.1
TICK_INTERVAL_SECONDS: float = 1 / 60

# Root object name fragments treated as stuck loading curtains/overlays
LOADING_SCREEN_PATTERNS: tuple[str, ...] = (
    "loading",
    "loadingscreen",
    "loading_screen",
    "transition",
    "fade",
    "blackout",
)
