"""Internal application services."""

from .validation import (
    ValidationError,
    validate_court_number,
    validate_match_type,
    validate_roster,
)
from .overlay import flatten_match, point_label

__all__ = [
    "ValidationError",
    "validate_court_number",
    "validate_match_type",
    "validate_roster",
    "flatten_match",
    "point_label",
]
