"""Tiebreak engine.

Points are raw counters.  The serve changes after the first point and then
every two points; ends are flagged for a change every six points.
"""

from typing import Any, Dict

from .rotation import rotate_server
from .sets import close_set
from .settings import tiebreak_points_to_win
from .state import other_team


def _count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


def close_tiebreak(match: Dict[str, Any], team: str) -> Dict[str, Any]:
    """Award the tiebreak, and with it the set, to ``team``."""

    current = match["score"]["currentSet"]
    game = current["currentGame"]
    current["tiebreak"] = {"teamA": _count(game.get("teamA")), "teamB": _count(game.get("teamB"))}
    current[team] += 1
    return close_set(match, team)


def score_tiebreak_point(match: Dict[str, Any], team: str) -> Dict[str, Any]:
    current = match["score"]["currentSet"]
    game = current["currentGame"]
    opponent = other_team(team)
    game[team] = _count(game.get(team)) + 1
    game[opponent] = _count(game.get(opponent))

    target = tiebreak_points_to_win(match["settings"], current)
    if game[team] >= target and game[team] - game[opponent] >= 2:
        return close_tiebreak(match, team)

    total = game["teamA"] + game["teamB"]
    if total % 2 == 1:
        rotate_server(match)
    if total % 6 == 0:
        match["shouldChangeSides"] = True
    return match
