"""
Configuration and path resolution for scene_dump.

Resolves the game root, bundle root and dump path from explicit arguments,
environment variables (optionally loaded from a .env file) and config.py.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

import config as config_module


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing."""


@dataclass(frozen=True)
class ScanSettings:  # pylint: disable=too-many-instance-attributes
    """Resolved settings for one controller."""

    bundle_root: Path
    dump_path: Path
    bundle_extension: str = config_module.BUNDLE_EXTENSION
    load_timeout: float = config_module.LOAD_TIMEOUT_SECONDS
    unload_timeout: float = config_module.UNLOAD_TIMEOUT_SECONDS
    settle_delay: float = config_module.SETTLE_DELAY_SECONDS
    scene_pacing: float = config_module.SCENE_PACING_SECONDS
    bundle_pacing: float = config_module.BUNDLE_PACING_SECONDS
    tick_interval: float = config_module.TICK_INTERVAL_SECONDS
    loading_screen_patterns: tuple[str, ...] = config_module.LOADING_SCREEN_PATTERNS


def _resolve_env_path(env_path: Optional[str] = None) -> str:
    """
    Determine which .env file should be loaded.

    Priority order:
      1. Explicit parameter
      2. SCENE_DUMP_ENV_FILE environment variable
      3. ~/.env
    """
    if env_path:
        return env_path
    env_file = os.environ.get("SCENE_DUMP_ENV_FILE")
    if env_file:
        return env_file
    return str(Path.home() / ".env")


def _first_path(*candidates) -> Path | None:
    for candidate in candidates:
        if candidate:
            return Path(candidate).expanduser()
    return None


def determine_game_root(game_root: str | Path | None = None) -> Path:
    """Return the game installation root.

    Raises:
        ConfigurationError: If no root is configured anywhere.
    """
    resolved = _first_path(
        game_root,
        os.environ.get("SCENE_DUMP_GAME_ROOT"),
        getattr(config_module, "GAME_ROOT_PATH", None),
    )
    if resolved is None:
        raise ConfigurationError(
            "No game root configured. Set GAME_ROOT_PATH in config_local.py "
            "or the SCENE_DUMP_GAME_ROOT environment variable."
        )
    return resolved


def default_bundle_root(game_root: Path) -> Path:
    """Return the addressables bundle folder under the game's data folder."""
    return game_root.joinpath(config_module.GAME_DATA_DIRNAME, *config_module.BUNDLE_RELATIVE_PATH)


def parse_patterns(text: str) -> tuple[str, ...]:
    """Parse a comma-separated pattern list into lower-cased, non-empty entries."""
    return tuple(part.strip().lower() for part in text.split(",") if part.strip())


def load_settings(
    *,
    env_file: str | None = None,
    game_root: str | Path | None = None,
    bundle_root: str | Path | None = None,
    dump_path: str | Path | None = None,
) -> ScanSettings:
    """Resolve ScanSettings from arguments, environment, .env and config.py.

    Raises:
        ConfigurationError: If a path cannot be derived because no game root is set.
    """
    resolved_env = _resolve_env_path(env_file)
    if load_dotenv(resolved_env):
        logging.debug("Loaded scanner environment from %s", resolved_env)

    resolved_bundle_root = _first_path(bundle_root, os.environ.get("SCENE_DUMP_BUNDLE_ROOT"))
    resolved_dump_path = _first_path(dump_path, os.environ.get("SCENE_DUMP_OUTPUT"))
    if resolved_bundle_root is None or resolved_dump_path is None:
        root = determine_game_root(game_root)
        if resolved_bundle_root is None:
            resolved_bundle_root = default_bundle_root(root)
        if resolved_dump_path is None:
            resolved_dump_path = root / config_module.DUMP_FILENAME

    patterns = config_module.LOADING_SCREEN_PATTERNS
    env_patterns = os.environ.get("SCENE_DUMP_CLEANUP_PATTERNS")
    if env_patterns:
        patterns = parse_patterns(env_patterns)

    return ScanSettings(
        bundle_root=resolved_bundle_root,
        dump_path=resolved_dump_path,
        loading_screen_patterns=patterns,
    )
