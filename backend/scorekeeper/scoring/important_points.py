"""Important-point analyzer.

Read-only queries over a match snapshot.  A game point is read straight off
the point score.  Set and match points are game points whose conversion
would also end the set or the match, checked by running the point engine on
a copy, so every scoring format (fast4, super set, golden game, disabled
tiebreaks) is covered by the same rules that score the match.
"""

from typing import Any, Dict, NamedTuple, Optional

from .engine import apply_point
from .settings import TEAMS, normalize_settings, tiebreak_points_to_win
from .state import is_playable, other_team

MATCH_POINT = "MATCH POINT"
SET_POINT = "SET POINT"
GAME_POINT = "GAME POINT"
TIEBREAK_POINT = "TIEBREAK POINT"

_POINT_INDEX = {0: 0, 15: 1, 30: 2, 40: 3, "Ad": 4}


class _Probe(NamedTuple):
    team: Optional[str]
    wins_set: bool
    wins_match: bool


def _point_index(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int) and value > 40:
        return 4
    if isinstance(value, (int, str)):
        return _POINT_INDEX.get(value)
    return None


def _tiebreak_game_point(match: Dict[str, Any]) -> Optional[str]:
    current = match["score"]["currentSet"]
    game = current.get("currentGame") or {}
    target = tiebreak_points_to_win(normalize_settings(match.get("settings")), current)
    for team in TEAMS:
        mine, theirs = game.get(team, 0), game.get(other_team(team), 0)
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (mine, theirs)):
            return None
        if mine >= target - 1 and mine > theirs:
            return team
    return None


def _regular_game_point(match: Dict[str, Any]) -> Optional[str]:
    game = match["score"]["currentSet"].get("currentGame") or {}
    for team in TEAMS:
        mine = _point_index(game.get(team, 0))
        theirs = _point_index(game.get(other_team(team), 0))
        if mine is None or theirs is None:
            continue
        if mine == 4 and theirs <= 3:
            return team
        if mine == 3 and theirs <= 2:
            return team
    return None


def is_game_point(match: Any) -> Optional[str]:
    """The team one point away from the current game (or tiebreak), if any."""

    if not is_playable(match):
        return None
    if match["score"]["currentSet"].get("isTiebreak"):
        return _tiebreak_game_point(match)
    return _regular_game_point(match)


def _probe(match: Any) -> _Probe:
    team = is_game_point(match)
    if team is None:
        return _Probe(None, False, False)
    sets_before = len(match["score"].get("sets") or [])
    after = apply_point(match, team)
    wins_set = len(after["score"]["sets"]) > sets_before
    return _Probe(team, wins_set, wins_set and bool(after.get("isCompleted")))


def is_set_point(match: Any) -> Optional[str]:
    probe = _probe(match)
    return probe.team if probe.wins_set else None


def is_match_point(match: Any) -> Optional[str]:
    probe = _probe(match)
    return probe.team if probe.wins_match else None


def get_important_point(match: Any) -> Dict[str, Optional[str]]:
    """Highest-priority indicator for the next point.

    Returns ``{"type": None, "team": None}`` when nothing is at stake or the
    snapshot is empty, partial or already completed.
    """

    probe = _probe(match)
    if probe.team is None:
        return {"type": None, "team": None}
    if probe.wins_match:
        return {"type": MATCH_POINT, "team": probe.team}
    if probe.wins_set:
        return {"type": SET_POINT, "team": probe.team}
    if match["score"]["currentSet"].get("isTiebreak"):
        return {"type": TIEBREAK_POINT, "team": probe.team}
    return {"type": GAME_POINT, "team": probe.team}
