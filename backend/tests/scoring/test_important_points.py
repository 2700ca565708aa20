import os, sys
import random

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from scorekeeper.scoring import (
    GAME_POINT,
    MATCH_POINT,
    SET_POINT,
    apply_point,
    finish_match,
    get_important_point,
    init_match,
    is_game_point,
    is_match_point,
    is_set_point,
)

NEUTRAL = {"type": None, "team": None}


def _new_match(**settings):
    return init_match(settings, ["Alice"], ["Bob"])


def _play(match, *teams):
    for team in teams:
        match = apply_point(match, team)
    return match


def _score_game(match, team):
    return _play(match, team, team, team, team)


def _games(match, a, b):
    """Reach a game score of ``a``-``b`` in the current set, alternating games."""
    while match["score"]["currentSet"]["teamA"] < a or match["score"]["currentSet"]["teamB"] < b:
        if match["score"]["currentSet"]["teamA"] < a:
            match = _score_game(match, "teamA")
        if match["score"]["currentSet"]["teamB"] < b:
            match = _score_game(match, "teamB")
    return match


def test_fresh_match_has_no_important_point():
    assert get_important_point(_new_match()) == NEUTRAL


@pytest.mark.parametrize("match", [None, {}, {"score": {}}, "not a match"])
def test_partial_snapshots_are_neutral(match):
    assert get_important_point(match) == NEUTRAL
    assert is_game_point(match) is None


def test_completed_match_is_neutral():
    match = finish_match(_play(_new_match(), "teamA", "teamA", "teamA"), "teamA")
    assert get_important_point(match) == NEUTRAL


def test_forty_love_is_game_point():
    match = _play(_new_match(), "teamA", "teamA", "teamA")
    assert get_important_point(match) == {"type": GAME_POINT, "team": "teamA"}


def test_forty_thirty_is_game_point_but_deuce_is_not():
    match = _play(_new_match(), "teamB", "teamB", "teamB", "teamA", "teamA")
    assert is_game_point(match) == "teamB"
    match = apply_point(match, "teamA")
    assert get_important_point(match) == NEUTRAL


def test_advantage_is_game_point():
    match = _play(_new_match(), *(["teamA", "teamB"] * 3), "teamB")
    assert get_important_point(match) == {"type": GAME_POINT, "team": "teamB"}


def test_no_ad_deuce_is_not_reported():
    # Intentional: a deciding 40-40 (no-ad, fast4, golden point) is never
    # flagged for either side, even when it could decide the set or match.
    match = _play(_new_match(scoringSystem="no-ad"), *(["teamA", "teamB"] * 3))
    assert get_important_point(match) == NEUTRAL


def test_golden_point_deuce_is_not_reported_at_set_end():
    match = _games(_new_match(goldenPoint=True), 5, 4)
    match = _play(match, *(["teamA", "teamB"] * 3))
    # same rule as above: the deciding point stays unflagged
    assert get_important_point(match) == NEUTRAL


def test_five_love_forty_love_is_set_point():
    match = _play(_games(_new_match(), 5, 0), "teamA", "teamA", "teamA")
    assert get_important_point(match) == {"type": SET_POINT, "team": "teamA"}
    assert is_set_point(match) == "teamA"
    assert is_match_point(match) is None


def test_receiver_can_hold_set_point_at_five_four():
    match = _play(_games(_new_match(), 4, 5), "teamB", "teamB", "teamB")
    assert is_set_point(match) == "teamB"


def test_six_five_is_set_point():
    match = _games(_new_match(), 5, 5)
    match = _score_game(match, "teamA")
    match = _play(match, "teamA", "teamA", "teamA")
    assert get_important_point(match)["type"] == SET_POINT


def test_five_five_is_only_game_point():
    match = _play(_games(_new_match(), 5, 5), "teamA", "teamA", "teamA")
    assert get_important_point(match) == {"type": GAME_POINT, "team": "teamA"}


def test_match_point_in_second_set():
    match = _new_match(sets=3)
    for _ in range(6):
        match = _score_game(match, "teamA")
    match = _play(_games(match, 5, 3), "teamA", "teamA", "teamA")
    assert get_important_point(match) == {"type": MATCH_POINT, "team": "teamA"}
    assert is_match_point(match) == "teamA"
    assert is_set_point(match) == "teamA"


def test_tiebreak_game_point_is_set_point():
    match = _games(_new_match(), 6, 6)
    match = _play(match, *(["teamB"] * 5))
    assert get_important_point(match) == NEUTRAL
    match = apply_point(match, "teamB")
    assert get_important_point(match) == {"type": SET_POINT, "team": "teamB"}


def test_tiebreak_leader_needs_to_be_ahead():
    match = _games(_new_match(), 6, 6)
    match = _play(match, *(["teamA", "teamB"] * 6))
    assert get_important_point(match) == NEUTRAL
    match = apply_point(match, "teamA")
    assert is_set_point(match) == "teamA"


def test_super_tiebreak_threshold_follows_length():
    match = _new_match(sets=1, finalSetTiebreak=True, finalSetTiebreakLength=10)
    match = _play(_games(match, 6, 6), *(["teamA"] * 8))
    assert get_important_point(match) == NEUTRAL
    match = apply_point(match, "teamA")
    assert get_important_point(match) == {"type": MATCH_POINT, "team": "teamA"}


def test_fast4_three_all_is_set_point():
    match = _play(_games(_new_match(scoringSystem="fast4"), 3, 3), "teamA", "teamA", "teamA")
    assert get_important_point(match)["type"] == SET_POINT


def test_golden_game_five_all_is_set_point():
    match = _play(_games(_new_match(goldenGame=True), 5, 5), "teamA", "teamA", "teamA")
    assert get_important_point(match)["type"] == SET_POINT


def test_super_set_seven_all_is_game_point_only():
    match = _play(_games(_new_match(sets="super"), 7, 7), "teamA", "teamA", "teamA")
    assert get_important_point(match)["type"] == GAME_POINT


def test_analysis_does_not_change_the_snapshot():
    match = _play(_games(_new_match(), 5, 0), "teamA", "teamA", "teamA")
    before = repr(match)
    get_important_point(match)
    assert repr(match) == before


@pytest.mark.parametrize("seed", range(5))
def test_indicators_are_nested(seed):
    rng = random.Random(seed)
    match = _new_match(sets=3)
    for _ in range(600):
        if match["isCompleted"]:
            break
        result = get_important_point(match)
        if result["type"] == MATCH_POINT:
            assert is_set_point(match) == result["team"]
        if result["type"] in (MATCH_POINT, SET_POINT):
            assert is_game_point(match) == result["team"]
        match = apply_point(match, rng.choice(["teamA", "teamB"]))
