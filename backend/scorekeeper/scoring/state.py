"""Match snapshot construction.

A match is a plain JSON-compatible dict; the engines never keep references
to the snapshot they were given and always hand back a fresh one.
"""

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from .settings import TEAMS, normalize_settings

COURT_SIDES = ("left", "right")


def other_team(team: str) -> str:
    return "teamB" if team == "teamA" else "teamA"


def check_team(team: Any) -> str:
    if team not in TEAMS:
        raise ValueError(f"invalid team: {team!r}")
    return team


def new_game() -> Dict[str, Any]:
    return {"teamA": 0, "teamB": 0}


def new_set(*, tiebreak: bool = False) -> Dict[str, Any]:
    """A fresh set; ``tiebreak`` seeds it directly as a deciding super tiebreak."""

    return {
        "teamA": 0,
        "teamB": 0,
        "games": [],
        "currentGame": new_game(),
        "isTiebreak": tiebreak,
        "isSuperTiebreak": tiebreak,
    }


def _player(entry: Any, fallback_id: str) -> Dict[str, Any]:
    if isinstance(entry, dict):
        player = dict(entry)
        player.setdefault("id", fallback_id)
        player.setdefault("name", str(player["id"]))
        return player
    return {"id": str(entry), "name": str(entry)}


def _team(players: Iterable[Any], team: str) -> Dict[str, Any]:
    return {
        "players": [
            _player(entry, f"{team}-p{index}")
            for index, entry in enumerate(players, start=1)
        ]
    }


def init_match(
    settings: Optional[Dict[str, Any]],
    team_a: Iterable[Any],
    team_b: Iterable[Any],
    *,
    match_type: str = "tennis",
    match_format: Optional[str] = None,
    server: str = "teamA",
    team_a_side: str = "left",
    court_number: Optional[int] = None,
    match_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a new match snapshot with an all-zero score.

    Players may be given as names or as ``{"id", "name"}`` mappings.  When
    ``match_format`` is omitted it follows the size of team A.
    """

    team_a_entry = _team(team_a, "teamA")
    team_b_entry = _team(team_b, "teamB")
    if match_format not in ("singles", "doubles"):
        match_format = "doubles" if len(team_a_entry["players"]) > 1 else "singles"
    if server not in TEAMS:
        server = "teamA"
    if team_a_side not in COURT_SIDES:
        team_a_side = "left"

    return {
        "id": match_id or uuid.uuid4().hex,
        "type": match_type,
        "format": match_format,
        "createdAt": datetime.now(timezone.utc).isoformat(),
        "settings": normalize_settings(settings),
        "teamA": team_a_entry,
        "teamB": team_b_entry,
        "score": {
            "teamA": 0,
            "teamB": 0,
            "sets": [],
            "currentSet": new_set(),
        },
        "currentServer": {"team": server, "playerIndex": 0},
        "courtSides": {
            "teamA": team_a_side,
            "teamB": "right" if team_a_side == "left" else "left",
        },
        "shouldChangeSides": False,
        "isCompleted": False,
        "winner": None,
        "courtNumber": court_number,
    }


def is_playable(match: Any) -> bool:
    """True when a point may still be applied to ``match``."""

    if not isinstance(match, dict) or match.get("isCompleted"):
        return False
    score = match.get("score")
    return isinstance(score, dict) and isinstance(score.get("currentSet"), dict)


def snapshot(match: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-copy ``match`` and fill in the structure the engines rely on.

    Settings are normalized here, so snapshots loaded from older records or
    built by hand get the same defaults as freshly created matches.
    """

    updated = copy.deepcopy(match)
    updated["settings"] = normalize_settings(updated.get("settings"))
    updated.setdefault("shouldChangeSides", False)
    updated.setdefault("isCompleted", False)
    updated.setdefault("winner", None)

    score = updated.setdefault("score", {})
    score.setdefault("teamA", 0)
    score.setdefault("teamB", 0)
    if not isinstance(score.get("sets"), list):
        score["sets"] = []

    current = score.get("currentSet")
    if isinstance(current, dict):
        current.setdefault("teamA", 0)
        current.setdefault("teamB", 0)
        if not isinstance(current.get("games"), list):
            current["games"] = []
        if not isinstance(current.get("currentGame"), dict):
            current["currentGame"] = new_game()
        current["currentGame"].setdefault("teamA", 0)
        current["currentGame"].setdefault("teamB", 0)
        current.setdefault("isTiebreak", False)
        current.setdefault("isSuperTiebreak", False)
    return updated


def summary(match: Dict[str, Any]) -> Dict[str, Any]:
    """Compact score view used by match listings and stream messages."""

    score = match.get("score") or {}
    current = score.get("currentSet") or {}
    game = current.get("currentGame") or {}
    return {
        "sets": {"teamA": score.get("teamA", 0), "teamB": score.get("teamB", 0)},
        "games": {"teamA": current.get("teamA", 0), "teamB": current.get("teamB", 0)},
        "points": {"teamA": game.get("teamA", 0), "teamB": game.get("teamB", 0)},
        "setScores": [
            {"teamA": s.get("teamA"), "teamB": s.get("teamB")}
            for s in score.get("sets") or []
        ],
        "isTiebreak": bool(current.get("isTiebreak")),
        "isCompleted": bool(match.get("isCompleted")),
        "winner": match.get("winner"),
    }
