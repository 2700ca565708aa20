"""Tennis and padel scoring core.

Every operation takes a match snapshot and returns a new one; nothing here
does I/O or keeps state between calls.
"""

from .engine import apply_point, finish_match, remove_point
from .games import win_game
from .important_points import (
    GAME_POINT,
    MATCH_POINT,
    SET_POINT,
    TIEBREAK_POINT,
    get_important_point,
    is_game_point,
    is_match_point,
    is_set_point,
)
from .rotation import apply_pending_side_change, switch_server, toggle_sides
from .sets import win_set
from .settings import TEAMS, normalize_settings, sets_to_win
from .state import init_match, is_playable, snapshot, summary

__all__ = [
    "GAME_POINT",
    "MATCH_POINT",
    "SET_POINT",
    "TEAMS",
    "TIEBREAK_POINT",
    "apply_pending_side_change",
    "apply_point",
    "finish_match",
    "get_important_point",
    "init_match",
    "is_game_point",
    "is_match_point",
    "is_playable",
    "is_set_point",
    "normalize_settings",
    "remove_point",
    "sets_to_win",
    "snapshot",
    "summary",
    "switch_server",
    "toggle_sides",
    "win_game",
    "win_set",
]
