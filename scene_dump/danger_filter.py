"""Scenes that must never be loaded during a scan."""

from __future__ import annotations

# Scenes that re-init the menu, quit to menu, play cinematics or credits,
# or hand off to travel sequences.
DANGEROUS_PREFIXES: tuple[str, ...] = (
    "menu_",
    "pre_menu",
    "quit_to_menu",
    "opening_sequence",
    "cinematic_",
    "room_caravan_",
)
DANGEROUS_SUBSTRINGS: tuple[str, ...] = (
    "credits",
    "end_game_completion",
)


def is_dangerous(scene_name: str | None) -> bool:
    """Return True when loading the scene would hijack the host's global flow."""
    if not scene_name:
        return False
    name = scene_name.lower()
    if name.startswith(DANGEROUS_PREFIXES):
        return True
    return any(fragment in name for fragment in DANGEROUS_SUBSTRINGS)
