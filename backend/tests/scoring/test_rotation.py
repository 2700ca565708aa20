import os, sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from scorekeeper.scoring import (
    apply_pending_side_change,
    apply_point,
    finish_match,
    init_match,
    switch_server,
    toggle_sides,
)


def _score_game(match, team):
    for _ in range(4):
        match = apply_point(match, team)
    return match


def _server(match):
    return match["currentServer"]["team"], match["currentServer"]["playerIndex"]


def test_doubles_rotation_visits_every_player_once():
    match = init_match(None, ["A1", "A2"], ["B1", "B2"])
    assert match["format"] == "doubles"
    servers = []
    for _ in range(4):
        servers.append(_server(match))
        match = _score_game(match, "teamA")
    assert servers == [("teamA", 0), ("teamB", 0), ("teamA", 1), ("teamB", 1)]
    assert _server(match) == ("teamA", 0)


def test_singles_switch_server_alternates_teams():
    match = init_match(None, ["Alice"], ["Bob"])
    match = switch_server(match)
    assert _server(match) == ("teamB", 0)
    match = switch_server(match)
    assert _server(match) == ("teamA", 0)


def test_initial_server_and_sides_are_configurable():
    match = init_match(None, ["Alice"], ["Bob"], server="teamB", team_a_side="right")
    assert _server(match) == ("teamB", 0)
    assert match["courtSides"] == {"teamA": "right", "teamB": "left"}


def test_windbreak_rotates_on_odd_game_totals_only():
    match = init_match({"windbreak": True}, ["Alice"], ["Bob"])
    servers = []
    for _ in range(3):
        match = _score_game(match, "teamA")
        servers.append(_server(match)[0])
    assert servers == ["teamB", "teamB", "teamA"]


def test_toggle_sides_swaps_unconditionally():
    match = init_match(None, ["Alice"], ["Bob"])
    match = toggle_sides(match)
    assert match["courtSides"] == {"teamA": "right", "teamB": "left"}
    assert toggle_sides(toggle_sides(match))["courtSides"] == match["courtSides"]


def test_pending_side_change_is_applied_once():
    match = _score_game(init_match(None, ["Alice"], ["Bob"]), "teamA")
    assert match["shouldChangeSides"] is True

    match = apply_pending_side_change(match)
    assert match["shouldChangeSides"] is False
    assert match["courtSides"] == {"teamA": "right", "teamB": "left"}

    assert apply_pending_side_change(match) == match


def test_side_change_flag_follows_odd_game_totals():
    match = init_match(None, ["Alice"], ["Bob"])
    flags = []
    for _ in range(3):
        match = apply_pending_side_change(_score_game(match, "teamA"))
        flags.append(match["courtSides"]["teamA"])
    assert flags == ["right", "right", "left"]


def test_rotation_helpers_ignore_completed_matches():
    match = finish_match(init_match(None, ["Alice"], ["Bob"]), "teamB")
    assert switch_server(match) == match
    assert toggle_sides(match) == match
