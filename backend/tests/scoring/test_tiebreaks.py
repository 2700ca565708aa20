import os, sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from scorekeeper.scoring import apply_pending_side_change, apply_point, init_match


def _new_match(**settings):
    return init_match(settings, ["Alice"], ["Bob"])


def _play(match, *teams):
    for team in teams:
        match = apply_point(match, team)
    return match


def _score_game(match, team):
    return _play(match, team, team, team, team)


def _to_games(match, games):
    for _ in range(games):
        match = _score_game(match, "teamA")
        match = _score_game(match, "teamB")
    return match


def _win_set(match, team):
    for _ in range(6):
        match = _score_game(match, team)
    return match


def _tiebreak(match):
    return match["score"]["currentSet"]["currentGame"]


def test_tiebreak_starts_at_six_all():
    match = _to_games(_new_match(), 6)
    current = match["score"]["currentSet"]
    assert current["isTiebreak"] is True
    assert current["isSuperTiebreak"] is False
    assert _tiebreak(match) == {"teamA": 0, "teamB": 0}


def test_tiebreak_points_are_raw_counters():
    match = _to_games(_new_match(), 6)
    match = _play(match, "teamA", "teamA", "teamA", "teamA", "teamB")
    assert _tiebreak(match) == {"teamA": 4, "teamB": 1}


def test_tiebreak_won_seven_five_is_archived():
    match = _to_games(_new_match(), 6)
    match = _play(match, *(["teamA"] * 5 + ["teamB"] * 5 + ["teamA", "teamA"]))
    assert match["score"]["sets"] == [
        {
            "teamA": 7,
            "teamB": 6,
            "winner": "teamA",
            "tiebreak": {"teamA": 7, "teamB": 5},
        }
    ]
    assert match["score"]["teamA"] == 1
    assert match["score"]["currentSet"]["isTiebreak"] is False
    assert match["score"]["currentSet"]["teamA"] == 0


def test_tiebreak_requires_two_point_margin():
    match = _to_games(_new_match(), 6)
    match = _play(match, *(["teamA"] * 6 + ["teamB"] * 6))
    match = apply_point(match, "teamA")
    assert _tiebreak(match) == {"teamA": 7, "teamB": 6}
    assert match["score"]["sets"] == []

    match = apply_point(match, "teamA")
    assert match["score"]["sets"][0]["tiebreak"] == {"teamA": 8, "teamB": 6}


def test_championship_tiebreak_goes_to_ten():
    match = _to_games(_new_match(tiebreakType="championship"), 6)
    match = _play(match, *(["teamB"] * 7))
    assert match["score"]["sets"] == []
    match = _play(match, "teamB", "teamB", "teamB")
    assert match["score"]["sets"][0]["tiebreak"] == {"teamA": 0, "teamB": 10}


def test_tiebreak_serve_changes_after_first_point_then_every_two():
    match = _to_games(_new_match(), 6)
    assert match["currentServer"]["team"] == "teamA"
    servers = []
    for _ in range(5):
        match = apply_point(match, "teamA")
        servers.append(match["currentServer"]["team"])
    assert servers == ["teamB", "teamB", "teamA", "teamA", "teamB"]


def test_tiebreak_flags_side_change_every_six_points():
    match = apply_pending_side_change(_to_games(_new_match(), 6))
    assert match["shouldChangeSides"] is False
    match = _play(match, "teamA", "teamB", "teamA", "teamB", "teamA")
    assert match["shouldChangeSides"] is False
    match = apply_point(match, "teamB")
    assert match["shouldChangeSides"] is True


def test_tiebreak_at_four_all():
    match = _to_games(_new_match(tiebreakAt="4-4"), 4)
    assert match["score"]["currentSet"]["isTiebreak"] is True


def test_disabled_tiebreak_plays_advantage_set():
    match = _to_games(_new_match(tiebreakEnabled=False), 6)
    assert match["score"]["currentSet"]["isTiebreak"] is False
    match = _score_game(match, "teamA")
    assert match["score"]["sets"] == []
    match = _score_game(match, "teamA")
    assert match["score"]["sets"][0] == {"teamA": 8, "teamB": 6, "winner": "teamA"}


def test_final_set_super_tiebreak_is_preseeded():
    match = _new_match(sets=3, finalSetTiebreak=True, finalSetTiebreakLength=10)
    match = _win_set(match, "teamA")
    assert match["score"]["currentSet"]["isTiebreak"] is False
    match = _win_set(match, "teamB")

    current = match["score"]["currentSet"]
    assert current["isTiebreak"] is True
    assert current["isSuperTiebreak"] is True

    match = _play(match, *(["teamA"] * 9 + ["teamB"] * 8))
    assert match["isCompleted"] is False
    match = apply_point(match, "teamA")
    assert match["isCompleted"] is True
    assert match["winner"] == "teamA"
    assert match["score"]["sets"][2] == {
        "teamA": 1,
        "teamB": 0,
        "winner": "teamA",
        "tiebreak": {"teamA": 10, "teamB": 8},
    }


def test_seven_point_final_set_tiebreak():
    match = _new_match(sets=3, finalSetTiebreak=True, finalSetTiebreakLength=7)
    match = _win_set(_win_set(match, "teamA"), "teamB")
    match = _play(match, *(["teamB"] * 7))
    assert match["winner"] == "teamB"


def test_two_set_match_goes_to_super_tiebreak_after_split():
    match = _new_match(sets=2)
    assert match["settings"]["finalSetTiebreak"] is True
    match = _win_set(match, "teamA")
    assert match["score"]["currentSet"]["isTiebreak"] is False
    match = _win_set(match, "teamB")
    assert match["isCompleted"] is False
    assert match["score"]["currentSet"]["isSuperTiebreak"] is True


def test_single_set_final_tiebreak_starts_at_tiebreak_games():
    match = _new_match(sets=1, finalSetTiebreak=True)
    assert match["score"]["currentSet"]["isTiebreak"] is False
    match = _to_games(match, 6)
    current = match["score"]["currentSet"]
    assert current["isTiebreak"] is True
    assert current["isSuperTiebreak"] is True
    match = _play(match, *(["teamA"] * 9))
    assert match["isCompleted"] is False
    match = apply_point(match, "teamA")
    assert match["winner"] == "teamA"
