import copy
import os, sys
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from scorekeeper.scoring import apply_point, finish_match, init_match


def _new_match(**settings):
    return init_match(settings, ["Alice"], ["Bob"])


def _play(match, *teams):
    for team in teams:
        match = apply_point(match, team)
    return match


def _score_game(match, team):
    return _play(match, team, team, team, team)


def _points(match):
    game = match["score"]["currentSet"]["currentGame"]
    return game["teamA"], game["teamB"]


def _games(match):
    current = match["score"]["currentSet"]
    return current["teamA"], current["teamB"]


def test_classic_point_progression():
    match = _new_match()
    seen = []
    for _ in range(3):
        match = apply_point(match, "teamA")
        seen.append(_points(match))
    assert seen == [(15, 0), (30, 0), (40, 0)]

    match = apply_point(match, "teamA")
    assert _games(match) == (1, 0)
    assert _points(match) == (0, 0)
    assert match["score"]["currentSet"]["games"] == [{"winner": "teamA"}]


def test_game_win_rotates_server_and_flags_side_change():
    match = _new_match()
    assert match["currentServer"] == {"team": "teamA", "playerIndex": 0}
    match = _score_game(match, "teamA")
    assert match["currentServer"] == {"team": "teamB", "playerIndex": 0}
    assert match["shouldChangeSides"] is True


def test_deuce_and_advantage():
    match = _play(_new_match(), "teamA", "teamA", "teamA", "teamB", "teamB", "teamB")
    assert _points(match) == (40, 40)

    match = apply_point(match, "teamA")
    assert _points(match) == ("Ad", 40)

    match = apply_point(match, "teamB")
    assert _points(match) == (40, 40)

    match = _play(match, "teamA", "teamA")
    assert _games(match) == (1, 0)
    assert _points(match) == (0, 0)


def test_golden_point_decides_deuce():
    match = _new_match(goldenPoint=True)
    match = _play(match, "teamA", "teamA", "teamA", "teamB", "teamB", "teamB")
    match = apply_point(match, "teamB")
    assert _games(match) == (0, 1)
    assert _points(match) == (0, 0)


@pytest.mark.parametrize("system", ["no-ad", "fast4"])
def test_point_at_forty_is_decisive_without_advantage(system):
    match = _new_match(scoringSystem=system)
    match = _play(match, "teamA", "teamA", "teamA", "teamB", "teamB", "teamB")
    assert _points(match) == (40, 40)
    match = apply_point(match, "teamB")
    assert _games(match) == (0, 1)
    assert "Ad" not in _points(match)


def test_standard_set_needs_two_game_margin():
    match = _new_match()
    for _ in range(5):
        match = _score_game(match, "teamA")
        match = _score_game(match, "teamB")
    match = _score_game(match, "teamA")
    assert _games(match) == (6, 5)
    assert match["score"]["sets"] == []

    match = _score_game(match, "teamA")
    assert match["score"]["sets"][0]["teamA"] == 7
    assert match["score"]["sets"][0]["teamB"] == 5
    assert match["score"]["sets"][0]["winner"] == "teamA"
    assert _games(match) == (0, 0)


def test_fast4_set_won_at_four_with_one_game_margin():
    match = _new_match(scoringSystem="fast4")
    for _ in range(3):
        match = _score_game(match, "teamA")
        match = _score_game(match, "teamB")
    match = _score_game(match, "teamA")
    assert match["score"]["sets"][0] == {"teamA": 4, "teamB": 3, "winner": "teamA"}


def test_golden_game_takes_set_at_six_five():
    match = _new_match(goldenGame=True)
    for _ in range(5):
        match = _score_game(match, "teamA")
        match = _score_game(match, "teamB")
    match = _score_game(match, "teamB")
    assert match["score"]["sets"][0] == {"teamA": 5, "teamB": 6, "winner": "teamB"}


def test_golden_point_and_golden_game_stack():
    match = _new_match(goldenPoint=True, goldenGame=True)
    for _ in range(5):
        match = _score_game(match, "teamA")
        match = _score_game(match, "teamB")
    match = _play(match, "teamA", "teamA", "teamA", "teamB", "teamB", "teamB", "teamA")
    assert match["score"]["sets"][0]["winner"] == "teamA"
    assert match["score"]["sets"][0]["teamA"] == 6


def test_apply_point_does_not_mutate_input():
    match = _play(_new_match(), "teamA", "teamB")
    before = copy.deepcopy(match)
    updated = apply_point(match, "teamA")
    assert match == before
    assert updated is not match
    assert _points(updated) == (30, 15)


def test_completed_match_rejects_points():
    match = finish_match(_new_match(), "teamA")
    assert apply_point(match, "teamB") == match


def test_missing_match_is_returned_unchanged():
    assert apply_point(None, "teamA") is None
    assert apply_point({}, "teamA") == {}


def test_unknown_team_raises():
    with pytest.raises(ValueError):
        apply_point(_new_match(), "teamC")
