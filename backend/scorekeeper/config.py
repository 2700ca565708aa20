import logging
import os

logger = logging.getLogger(__name__)


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _positive_int(env_var: str, default: int) -> int:
    raw_value = os.getenv(env_var)
    if raw_value is None:
        return default

    try:
        value = int(raw_value)
    except ValueError:
        logger.warning(
            "%s is not a valid integer (got %r); defaulting to %d",
            env_var,
            raw_value,
            default,
        )
        return default

    if value <= 0:
        logger.warning("%s must be positive; defaulting to %d", env_var, default)
        return default

    return value


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")

# Pre-mutation snapshots kept per match for undo
MATCH_HISTORY_LIMIT = _positive_int("MATCH_HISTORY_LIMIT", 50)
MATCH_CACHE_TTL = _positive_int("MATCH_CACHE_TTL", 30)

# Overlay consumers expect at least this many teamX_setN columns
OVERLAY_MIN_SETS = _positive_int("OVERLAY_MIN_SETS", 5)

# Courts listed by GET /courts
COURT_COUNT = _positive_int("COURT_COUNT", 10)
