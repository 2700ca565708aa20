"""Flat match view for broadcast overlays (vMix data sources).

Overlay software binds text fields to top-level keys and cannot walk nested
objects, so every value the graphics need is flattened into one dict.
Booleans are rendered as ``"True"``/``"False"`` strings and missing values as
empty strings, which is what the title designer expects.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from ..config import OVERLAY_MIN_SETS
from ..scoring import (
    GAME_POINT,
    MATCH_POINT,
    SET_POINT,
    TIEBREAK_POINT,
    get_important_point,
    normalize_settings,
    sets_to_win,
)
from ..scoring.settings import TEAMS
from ..time_utils import isoformat_utc

POINT_LABELS = {0: "0", 15: "15", 30: "30", 40: "40", "Ad": "Ad"}


def point_label(value: Any) -> str:
    """Display text for a regular-game point value."""

    if isinstance(value, bool):
        return "0"
    return POINT_LABELS.get(value, str(value) if value is not None else "0")


def _flag(value: Any) -> str:
    return "True" if value else "False"


def _player_names(match: Dict[str, Any], team: str) -> list[str]:
    players = (match.get(team) or {}).get("players") or []
    return [str(p.get("name", "")) if isinstance(p, dict) else str(p) for p in players]


def _team_fields(match: Dict[str, Any], team: str) -> Dict[str, Any]:
    score = match.get("score") or {}
    current = score.get("currentSet") or {}
    game = current.get("currentGame") or {}
    names = _player_names(match, team)

    if not current:
        game_score: Any = "0"
    elif current.get("isTiebreak"):
        game_score = game.get(team, 0)
    else:
        game_score = point_label(game.get(team, 0))

    server = match.get("currentServer") or {}
    return {
        f"{team}_name": " / ".join(name for name in names if name),
        f"{team}_player1_name": names[0] if len(names) > 0 else "",
        f"{team}_player2_name": names[1] if len(names) > 1 else "",
        f"{team}_score": score.get(team, 0),
        f"{team}_game_score": game_score,
        f"{team}_current_set": current.get(team, 0),
        f"{team}_serving": _flag(server.get("team") == team),
    }


def flatten_match(
    match: Dict[str, Any], *, now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Return the flat overlay record for ``match``."""

    settings = normalize_settings(match.get("settings"))
    score = match.get("score") or {}
    sets = score.get("sets") or []
    completed = bool(match.get("isCompleted"))
    winner = match.get("winner")
    important = get_important_point(match)

    data: Dict[str, Any] = {
        "match_id": match.get("id", ""),
        "court_number": match.get("courtNumber") or "",
    }
    for team in TEAMS:
        data.update(_team_fields(match, team))

    winner_names = _player_names(match, winner) if winner in TEAMS else []
    data.update(
        {
            "is_tiebreak": _flag((score.get("currentSet") or {}).get("isTiebreak")),
            "is_completed": _flag(completed),
            "winner": winner or "",
            "total_sets": settings["sets"],
            "sets_to_win": sets_to_win(settings),
            "current_set_number": len(sets) if completed else len(sets) + 1,
            "winner_team_name": " / ".join(winner_names),
            "winner_name1": winner_names[0] if len(winner_names) > 0 else "",
            "winner_name2": winner_names[1] if len(winner_names) > 1 else "",
            "important_point_type": important["type"] or "",
            "important_point_team": important["team"] or "",
            "is_match_point": _flag(important["type"] == MATCH_POINT),
            "is_set_point": _flag(important["type"] == SET_POINT),
            "is_game_point": _flag(
                important["type"] in (GAME_POINT, TIEBREAK_POINT)
            ),
        }
    )

    # A two-set match can still need a deciding third set
    columns = max(OVERLAY_MIN_SETS, settings["sets"], len(sets))
    for team in TEAMS:
        for index in range(columns):
            data[f"{team}_set{index + 1}"] = (
                sets[index].get(team, "") if index < len(sets) else ""
            )

    data["timestamp"] = isoformat_utc(now)
    return data
