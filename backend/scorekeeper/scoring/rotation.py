"""Serve rotation and court sides.

``rotate_server`` and ``swap_sides`` work in place on an engine's working
copy; ``switch_server``, ``toggle_sides`` and ``apply_pending_side_change``
are the public, copy-returning operations.
"""

from typing import Any, Dict

from .state import is_playable, other_team, snapshot


def _flip_side(side: str) -> str:
    return "right" if side == "left" else "left"


def rotate_server(match: Dict[str, Any]) -> Dict[str, Any]:
    """Pass the serve on.

    Singles alternate teams.  Doubles follow A[0] -> B[0] -> A[1] -> B[1]:
    team B hands the serve back to team A's other player.
    """

    server = match.get("currentServer")
    if not server:
        return match

    team = server.get("team", "teamA")
    if match.get("format") == "singles":
        server["team"] = other_team(team)
        server["playerIndex"] = 0
    elif team == "teamA":
        server["team"] = "teamB"
        server.setdefault("playerIndex", 0)
    else:
        server["team"] = "teamA"
        server["playerIndex"] = 1 if server.get("playerIndex", 0) == 0 else 0
    return match


def swap_sides(match: Dict[str, Any]) -> Dict[str, Any]:
    sides = match.get("courtSides") or {"teamA": "left", "teamB": "right"}
    match["courtSides"] = {
        "teamA": _flip_side(sides.get("teamA", "left")),
        "teamB": _flip_side(sides.get("teamB", "right")),
    }
    return match


def switch_server(match: Dict[str, Any]) -> Dict[str, Any]:
    if not is_playable(match):
        return match
    return rotate_server(snapshot(match))


def toggle_sides(match: Dict[str, Any]) -> Dict[str, Any]:
    if not is_playable(match):
        return match
    return swap_sides(snapshot(match))


def apply_pending_side_change(match: Dict[str, Any]) -> Dict[str, Any]:
    """Swap ends if the engines flagged a change, then clear the flag.

    Calling it again before the next flag is raised changes nothing.
    """

    if not is_playable(match) or not match.get("shouldChangeSides"):
        return match
    updated = swap_sides(snapshot(match))
    updated["shouldChangeSides"] = False
    return updated
