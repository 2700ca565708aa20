"""Set engine: archive a finished set, then end the match or start the next set."""

from typing import Any, Dict

from .rotation import swap_sides
from .settings import is_deciding_set, sets_to_win
from .state import check_team, is_playable, new_set, snapshot


def close_set(match: Dict[str, Any], team: str) -> Dict[str, Any]:
    """Record ``team`` taking the current set on a working copy."""

    settings = match["settings"]
    score = match["score"]
    current = score["currentSet"]

    score[team] += 1
    record = {"teamA": current["teamA"], "teamB": current["teamB"], "winner": team}
    if current.get("isTiebreak"):
        tiebreak = current.get("tiebreak") or current["currentGame"]
        record["tiebreak"] = {"teamA": tiebreak["teamA"], "teamB": tiebreak["teamB"]}
    score["sets"].append(record)

    if score[team] >= sets_to_win(settings):
        match["isCompleted"] = True
        match["winner"] = team
        return match

    next_set_number = len(score["sets"]) + 1
    score["currentSet"] = new_set(
        tiebreak=settings["finalSetTiebreak"]
        and is_deciding_set(settings, next_set_number)
    )
    if len(score["sets"]) % 2 == 1:
        swap_sides(match)
    return match


def win_set(match: Dict[str, Any], team: str) -> Dict[str, Any]:
    """Force ``team`` to win the current set as it stands."""

    check_team(team)
    if not is_playable(match):
        return match
    return close_set(snapshot(match), team)
