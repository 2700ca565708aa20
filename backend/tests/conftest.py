import os
import sys
import asyncio

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Honour any externally provided DATABASE_URL (e.g. CI may set a file-backed DB)
# but fall back to an in-memory SQLite database so local runs remain isolated.
DEFAULT_DB_URL = os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
# main.py refuses to start without explicit CORS origins
os.environ.setdefault("ALLOWED_ORIGINS", "http://testserver")

from scorekeeper import db, models  # noqa: F401
from scorekeeper.cache import match_cache, match_locks


@pytest.fixture(scope="session")
def session_loop():
    """Single event loop for all sync fixtures that need to run async DB code."""

    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture(autouse=True, scope="session")
def ensure_database(session_loop):
    """Ensure the test database starts clean and honours DATABASE_URL."""

    mp = pytest.MonkeyPatch()
    desired_url = os.getenv("DATABASE_URL") or DEFAULT_DB_URL
    mp.setenv("DATABASE_URL", desired_url)

    if desired_url.startswith("sqlite") and ":memory:" not in desired_url:
        path = desired_url.split("///")[-1]
        if os.path.exists(path):
            os.remove(path)

    db.engine = None
    db.AsyncSessionLocal = None
    yield
    session_loop.run_until_complete(db.dispose_engine())
    mp.undo()


@pytest.fixture(autouse=True)
def reset_match_cache(session_loop):
    """Drop cached snapshots and per-match locks between tests."""

    session_loop.run_until_complete(match_cache.clear())
    match_locks.clear()
    yield
    session_loop.run_until_complete(match_cache.clear())
    match_locks.clear()


@pytest.fixture
def anyio_backend():
    return "asyncio"
