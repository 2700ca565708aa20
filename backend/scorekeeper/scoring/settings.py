"""Match settings normalization and the rule queries derived from them.

Settings are fixed when a match is created.  ``normalize_settings`` is the
single place where missing or malformed fields are replaced by defaults; the
engines only ever read normalized settings.
"""

import math
from typing import Any, Dict, Optional

TEAMS = ("teamA", "teamB")

SCORING_SYSTEMS = ("classic", "no-ad", "fast4")
TIEBREAK_TYPES = ("regular", "championship")
TIEBREAK_AT_VALUES = ("4-4", "5-5", "6-6", "8-8")
SET_COUNTS = (1, 2, 3, 5)
FINAL_SET_TIEBREAK_LENGTHS = (7, 10)

SUPER_SET = "super"
SUPER_SET_TIEBREAK_AT = "8-8"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "sets": 3,
    "scoringSystem": "classic",
    "tiebreakEnabled": True,
    "tiebreakType": "regular",
    "tiebreakAt": "6-6",
    "finalSetTiebreak": False,
    "finalSetTiebreakLength": 10,
    "goldenGame": False,
    "goldenPoint": False,
    "windbreak": False,
    "isSuperSet": False,
}

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        return default
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _as_choice_int(value: Any, allowed: tuple, default: int) -> int:
    # bool is an int subclass; True must not read as one set
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number in allowed else default


def _as_choice(value: Any, allowed: tuple, default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    return default


def _as_tiebreak_at(value: Any, default: str) -> str:
    """Accept ``"6-6"``, ``"6"`` or ``6`` and return the canonical ``"6-6"``."""

    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        games = value
    elif isinstance(value, str):
        try:
            games = int(value.strip().split("-")[0])
        except ValueError:
            return default
    else:
        return default
    canonical = f"{games}-{games}"
    return canonical if canonical in TIEBREAK_AT_VALUES else default


def normalize_settings(raw: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Return a complete settings dict built from ``raw``.

    Every field falls back to ``DEFAULT_SETTINGS`` on its own, so a single bad
    value never discards the rest of the configuration.  Two formats imply
    fixed values:

    - ``sets="super"`` (or ``isSuperSet``) is one set played to 8 games with a
      regular tiebreak at 8-8, stored as ``sets=1`` and ``isSuperSet=True``.
    - ``sets=2`` always settles a 1-1 split with a final-set tiebreak.

    The function is idempotent: normalizing normalized settings is a no-op.
    """

    raw = raw if isinstance(raw, dict) else {}
    defaults = DEFAULT_SETTINGS

    super_set = raw.get("sets") == SUPER_SET or _as_bool(raw.get("isSuperSet"), False)

    settings = {
        "sets": 1
        if super_set
        else _as_choice_int(raw.get("sets"), SET_COUNTS, defaults["sets"]),
        "scoringSystem": _as_choice(
            raw.get("scoringSystem"), SCORING_SYSTEMS, defaults["scoringSystem"]
        ),
        "tiebreakEnabled": _as_bool(raw.get("tiebreakEnabled"), defaults["tiebreakEnabled"]),
        "tiebreakType": _as_choice(
            raw.get("tiebreakType"), TIEBREAK_TYPES, defaults["tiebreakType"]
        ),
        "tiebreakAt": _as_tiebreak_at(raw.get("tiebreakAt"), defaults["tiebreakAt"]),
        "finalSetTiebreak": _as_bool(raw.get("finalSetTiebreak"), defaults["finalSetTiebreak"]),
        "finalSetTiebreakLength": _as_choice_int(
            raw.get("finalSetTiebreakLength"),
            FINAL_SET_TIEBREAK_LENGTHS,
            defaults["finalSetTiebreakLength"],
        ),
        "goldenGame": _as_bool(raw.get("goldenGame"), defaults["goldenGame"]),
        "goldenPoint": _as_bool(raw.get("goldenPoint"), defaults["goldenPoint"]),
        "windbreak": _as_bool(raw.get("windbreak"), defaults["windbreak"]),
        "isSuperSet": super_set,
    }

    if super_set:
        settings["tiebreakEnabled"] = True
        settings["tiebreakType"] = "regular"
        settings["tiebreakAt"] = SUPER_SET_TIEBREAK_AT
    elif settings["tiebreakAt"] == SUPER_SET_TIEBREAK_AT:
        settings["tiebreakAt"] = defaults["tiebreakAt"]

    if settings["sets"] == 2:
        settings["finalSetTiebreak"] = True

    return settings


def sets_to_win(settings: Dict[str, Any]) -> int:
    """Number of sets a team needs to take the match."""

    if settings["sets"] == 2:
        return 2
    return math.ceil(settings["sets"] / 2)


def tiebreak_games(settings: Dict[str, Any]) -> int:
    return int(settings["tiebreakAt"].split("-")[0])


def games_to_win_set(settings: Dict[str, Any]) -> int:
    return 4 if settings["scoringSystem"] == "fast4" else 6


def is_deciding_set(settings: Dict[str, Any], set_number: int) -> bool:
    """Whether set ``set_number`` (1-based) is the one that decides the match.

    A two-set match has no deciding set of its own; the third set, played only
    after a 1-1 split, takes that role.
    """

    if settings["sets"] == 2:
        return set_number == 3
    return set_number == settings["sets"]


def tiebreak_points_to_win(settings: Dict[str, Any], current_set: Dict[str, Any]) -> int:
    if current_set.get("isSuperTiebreak"):
        return settings["finalSetTiebreakLength"]
    if settings["tiebreakType"] == "championship":
        return 10
    return 7
