"""Point engine: the entry point for every scored rally."""

from typing import Any, Dict, Optional

from .games import score_game_point, take_back_game_point
from .state import check_team, is_playable, snapshot
from .tiebreak import score_tiebreak_point


def apply_point(match: Optional[Dict[str, Any]], team: str) -> Optional[Dict[str, Any]]:
    """Return the snapshot after ``team`` wins a point.

    Completed, empty or partial matches are returned unchanged.  Callers must
    apply each rally exactly once; the engine has no notion of duplicates.
    """

    check_team(team)
    if not is_playable(match):
        return match

    updated = snapshot(match)
    if updated["score"]["currentSet"]["isTiebreak"]:
        return score_tiebreak_point(updated, team)
    return score_game_point(updated, team)


def remove_point(match: Optional[Dict[str, Any]], team: str) -> Optional[Dict[str, Any]]:
    """Take one point away from ``team`` in the current game or tiebreak.

    This is a score correction, not an undo: serve rotation and pending side
    changes are left untouched.  Restoring a stored snapshot is the way to
    undo a point completely.
    """

    check_team(team)
    if not is_playable(match):
        return match

    updated = snapshot(match)
    current = updated["score"]["currentSet"]
    if current["isTiebreak"]:
        game = current["currentGame"]
        value = game.get(team, 0)
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            game[team] = value - 1
        return updated
    return take_back_game_point(updated, team)


def finish_match(
    match: Optional[Dict[str, Any]], winner: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """End the match early, e.g. after a retirement.

    Without an explicit ``winner`` the match goes to team A only when it has
    won more sets, otherwise to team B.
    """

    if not isinstance(match, dict) or match.get("isCompleted"):
        return match
    if winner is not None:
        check_team(winner)

    updated = snapshot(match)
    if winner is None:
        score = updated["score"]
        winner = "teamA" if score["teamA"] > score["teamB"] else "teamB"
    updated["isCompleted"] = True
    updated["winner"] = winner
    return updated
