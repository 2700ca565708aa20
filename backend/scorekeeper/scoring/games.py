"""Regular-game engine: 0/15/30/40 progression and the end-of-game rules.

Rule precedence once a game is won:

1. super set (7-7 plays on, 8-8 goes to a tiebreak, 8+ with a two-game lead
   wins, which covers 9-7);
2. the deciding-set super tiebreak, then the regular tiebreak, at
   ``tiebreakAt``;
3. golden game at 6-5 / 5-6;
4. the standard set win (6 games and a two-game lead, or 4 games and a
   one-game lead under fast4).

Golden point only changes how a 40-40 game ends and stacks with all of the
above.  Golden game never fires in a super set or under fast4: the earlier
rules settle those sets before a 6-5 score exists.
"""

from typing import Any, Dict

from .rotation import rotate_server
from .sets import close_set
from .settings import games_to_win_set, is_deciding_set, tiebreak_games
from .state import check_team, is_playable, other_team, snapshot
from .tiebreak import close_tiebreak

ADVANTAGE = "Ad"
NEXT_POINT = {0: 15, 15: 30, 30: 40}
PREVIOUS_POINT = {15: 0, 30: 15, 40: 30}

SUPER_SET_GAMES = 8


def score_game_point(match: Dict[str, Any], team: str) -> Dict[str, Any]:
    game = match["score"]["currentSet"]["currentGame"]
    opponent = other_team(team)
    mine, theirs = game.get(team, 0), game.get(opponent, 0)

    if mine in NEXT_POINT and not isinstance(mine, bool):
        game[team] = NEXT_POINT[mine]
        return match
    if mine == ADVANTAGE:
        return close_game(match, team)
    if mine != 40:
        return match

    settings = match["settings"]
    if settings["scoringSystem"] != "classic" or theirs not in (40, ADVANTAGE):
        return close_game(match, team)
    if theirs == ADVANTAGE:
        game[team] = game[opponent] = 40
        return match
    if settings["goldenPoint"]:
        return close_game(match, team)
    game[team] = ADVANTAGE
    return match


def take_back_game_point(match: Dict[str, Any], team: str) -> Dict[str, Any]:
    """Step ``team``'s game score back by one point.

    Only the point value moves: serve rotation and side flags raised by
    earlier points stay as they are.
    """

    game = match["score"]["currentSet"]["currentGame"]
    opponent = other_team(team)
    mine = game.get(team, 0)
    if mine == ADVANTAGE:
        game[team] = 40
    elif mine == 40 and game.get(opponent) == ADVANTAGE:
        game[opponent] = 40
    elif mine in PREVIOUS_POINT and not isinstance(mine, bool):
        game[team] = PREVIOUS_POINT[mine]
    return match


def _start_tiebreak(current: Dict[str, Any], *, super_tiebreak: bool = False) -> None:
    current["isTiebreak"] = True
    current["isSuperTiebreak"] = super_tiebreak


def _resolve_super_set(match: Dict[str, Any]) -> Dict[str, Any]:
    current = match["score"]["currentSet"]
    a, b = current["teamA"], current["teamB"]
    if a == b == SUPER_SET_GAMES:
        _start_tiebreak(current)
        return match
    leader, lead_games, trail_games = ("teamA", a, b) if a > b else ("teamB", b, a)
    if lead_games >= SUPER_SET_GAMES and lead_games - trail_games >= 2:
        return close_set(match, leader)
    return match


def close_game(match: Dict[str, Any], team: str) -> Dict[str, Any]:
    """Record ``team`` winning the current game on a working copy."""

    settings = match["settings"]
    current = match["score"]["currentSet"]

    current[team] += 1
    current["games"].append({"winner": team})
    current["currentGame"] = {"teamA": 0, "teamB": 0}

    total_games = current["teamA"] + current["teamB"]
    if not settings["windbreak"] or total_games % 2 == 1:
        rotate_server(match)
    if total_games % 2 == 1:
        match["shouldChangeSides"] = True

    if settings["isSuperSet"]:
        return _resolve_super_set(match)

    a, b = current["teamA"], current["teamB"]
    at = tiebreak_games(settings)
    set_number = len(match["score"]["sets"]) + 1
    if settings["finalSetTiebreak"] and is_deciding_set(settings, set_number):
        if a == b == at:
            _start_tiebreak(current, super_tiebreak=True)
            return match
    elif settings["tiebreakEnabled"] and a == b == at:
        _start_tiebreak(current)
        return match

    if settings["goldenGame"] and {a, b} == {5, 6}:
        return close_set(match, "teamA" if a > b else "teamB")

    needed = games_to_win_set(settings)
    margin = 1 if settings["scoringSystem"] == "fast4" else 2
    if a >= needed and a - b >= margin:
        return close_set(match, "teamA")
    if b >= needed and b - a >= margin:
        return close_set(match, "teamB")
    return match


def win_game(match: Dict[str, Any], team: str) -> Dict[str, Any]:
    """Force ``team`` to win the current game.

    During a tiebreak the tiebreak itself is the game, so forcing it also
    settles the set.
    """

    check_team(team)
    if not is_playable(match):
        return match
    updated = snapshot(match)
    if updated["score"]["currentSet"]["isTiebreak"]:
        return close_tiebreak(updated, team)
    return close_game(updated, team)
