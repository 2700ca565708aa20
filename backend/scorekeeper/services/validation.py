from typing import Any, Dict, List, Optional, Sequence


class ValidationError(Exception):
    """Raised when a submitted match roster or format is invalid."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


FORMAT_TEAM_SIZES: dict[str, int] = {"singles": 1, "doubles": 2}

SPORT_RULES: dict[str, dict[str, object]] = {
    "tennis": {"formats": {"singles", "doubles"}},
    "padel": {"formats": {"doubles"}},
}

MAX_PLAYER_NAME_LENGTH = 100
MAX_COURT_NUMBER = 99


def _sport_label(sport_id: str) -> str:
    return sport_id.replace("_", " ").title() or "Sport"


def _player_name(entry: Any) -> Optional[str]:
    if isinstance(entry, dict):
        entry = entry.get("name")
    if not isinstance(entry, str):
        return None
    return entry.strip() or None


def validate_match_type(match_type: str, match_format: str) -> None:
    rules = SPORT_RULES.get(match_type)
    if not rules:
        allowed = ", ".join(sorted(SPORT_RULES))
        raise ValidationError(f"Unknown match type {match_type!r}. Use one of: {allowed}.")

    formats = rules.get("formats")
    if isinstance(formats, set) and match_format not in formats:
        formatted = ", ".join(sorted(formats))
        raise ValidationError(
            f"{_sport_label(match_type)} matches must be played as {formatted}."
        )


def validate_roster(
    match_type: str,
    match_format: str,
    teams: Dict[str, Sequence[Any]],
) -> Dict[str, List[str]]:
    """Check both teams against the format and return the cleaned player names.

    Rules:
    - The match type must be known and allow ``match_format``
    - Each team has exactly one player for singles and two for doubles
    - Player names are non-empty and at most ``MAX_PLAYER_NAME_LENGTH`` chars
    - A player may appear only once across both teams
    """

    validate_match_type(match_type, match_format)
    size = FORMAT_TEAM_SIZES[match_format]

    cleaned: Dict[str, List[str]] = {}
    seen: set[str] = set()
    for team, players in teams.items():
        players = list(players or [])
        if len(players) != size:
            raise ValidationError(
                f"{match_format.title()} matches require exactly {size} player(s) per team."
            )

        names: List[str] = []
        for index, entry in enumerate(players, start=1):
            name = _player_name(entry)
            if name is None:
                raise ValidationError(f"Player #{index} of {team} must have a name.")
            if len(name) > MAX_PLAYER_NAME_LENGTH:
                raise ValidationError(
                    f"Player #{index} of {team} has a name longer than "
                    f"{MAX_PLAYER_NAME_LENGTH} characters."
                )
            key = name.lower()
            if key in seen:
                raise ValidationError(f"Player {name!r} appears more than once.")
            seen.add(key)
            names.append(name)
        cleaned[team] = names

    return cleaned


def validate_court_number(value: Any) -> Optional[int]:
    if value is None:
        return None
    # Reject booleans explicitly (bool is a subclass of int in Python)
    if isinstance(value, bool):
        raise ValidationError("Court number must be an integer (not a boolean).")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Court number must be an integer.")
    if number < 1 or number > MAX_COURT_NUMBER:
        raise ValidationError(f"Court number must be between 1 and {MAX_COURT_NUMBER}.")
    return number
