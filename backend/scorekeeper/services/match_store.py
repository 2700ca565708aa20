"""Persistence for live match snapshots.

Each ``match`` row holds the current snapshot as JSON plus a bounded list of
earlier snapshots used for undo.  Reads go through a short TTL cache keyed by
both match id and share code; every successful write refreshes it.
"""

from __future__ import annotations

import copy
import logging
import secrets
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..cache import match_cache, match_locks
from ..config import MATCH_HISTORY_LIMIT
from ..exceptions import MatchNotFound, MatchUpdateFailed
from ..models import Match
from ..scoring import snapshot
from ..utils.sentry import capture_store_failure

logger = logging.getLogger(__name__)

CODE_LENGTH = 11
_CODE_ATTEMPTS = 10


def generate_code() -> str:
    """Random 11-digit numeric share code without a leading zero."""

    first = secrets.randbelow(9) + 1
    rest = secrets.randbelow(10 ** (CODE_LENGTH - 1))
    return f"{first}{rest:0{CODE_LENGTH - 1}d}"


def _state_from_row(row: Match) -> Dict[str, Any]:
    state = snapshot(row.state or {})
    state["id"] = row.id
    state["code"] = row.code
    state["courtNumber"] = row.court_number
    return state


def _reduced_state(match: Dict[str, Any]) -> Dict[str, Any]:
    """Drop per-game logs, the largest part of a long match snapshot."""

    reduced = copy.deepcopy(match)
    score = reduced.get("score") or {}
    for archived in score.get("sets") or []:
        archived.pop("games", None)
    current = score.get("currentSet")
    if isinstance(current, dict):
        current["games"] = []
    return reduced


def _write_row(row: Match, match: Dict[str, Any], history: List[Dict[str, Any]]) -> None:
    # JSON columns are not mutation-tracked; always assign fresh objects
    row.state = copy.deepcopy(match)
    row.history = history
    row.court_number = match.get("courtNumber")
    row.is_completed = bool(match.get("isCompleted"))


async def _cache(match: Dict[str, Any]) -> None:
    await match_cache.set_many((match.get("id"), match.get("code")), copy.deepcopy(match))


async def _find_row(session: AsyncSession, id_or_code: str) -> Optional[Match]:
    stmt = select(Match).where(or_(Match.id == id_or_code, Match.code == id_or_code))
    return (await session.execute(stmt)).scalars().first()


async def get_match(session: AsyncSession, id_or_code: str) -> Optional[Dict[str, Any]]:
    """Load a match by id or share code; ``None`` when it does not exist."""

    if not id_or_code:
        return None
    cached = await match_cache.get(id_or_code)
    if cached is not None:
        return copy.deepcopy(cached)

    row = await _find_row(session, id_or_code)
    if row is None:
        return None
    match = _state_from_row(row)
    await _cache(match)
    return match


async def require_match(session: AsyncSession, id_or_code: str) -> Dict[str, Any]:
    match = await get_match(session, id_or_code)
    if match is None:
        raise MatchNotFound(id_or_code)
    return match


async def _unique_code(session: AsyncSession) -> str:
    for _ in range(_CODE_ATTEMPTS):
        code = generate_code()
        taken = (
            await session.execute(select(Match.id).where(Match.code == code))
        ).scalar_one_or_none()
        if taken is None:
            return code
    raise RuntimeError("could not allocate a unique match code")


async def create_match(session: AsyncSession, match: Dict[str, Any]) -> Dict[str, Any]:
    """Persist a freshly initialised match and assign its share code."""

    created = copy.deepcopy(match)
    created["code"] = created.get("code") or await _unique_code(session)
    row = Match(
        id=created["id"],
        code=created["code"],
        type=created.get("type", "tennis"),
        format=created.get("format", "singles"),
    )
    _write_row(row, created, [])
    session.add(row)
    await session.commit()
    logger.info("Created match %s (code %s)", created["id"], created["code"])

    await _cache(created)
    return created


async def update_match(
    session: AsyncSession,
    match: Dict[str, Any],
    *,
    previous: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Save ``match`` and push ``previous`` onto the undo history.

    If the database rejects the write, the session is rolled back and the
    save is retried once without history and per-game logs.  A second
    failure raises ``MatchUpdateFailed``.
    """

    mid = match["id"]
    row = await session.get(Match, mid)
    if row is None:
        raise MatchNotFound(mid)

    history = list(row.history or [])
    if previous is not None:
        history.append(copy.deepcopy(previous))
    history = history[-MATCH_HISTORY_LIMIT:]

    try:
        _write_row(row, match, history)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.warning(
            "Saving match %s failed (%s); retrying with reduced payload", mid, exc
        )
        match = _reduced_state(match)
        try:
            row = await session.get(Match, mid)
            if row is None:
                raise MatchNotFound(mid) from exc
            _write_row(row, match, [])
            await session.commit()
        except SQLAlchemyError as retry_exc:
            await session.rollback()
            logger.error("Saving match %s failed after retry", mid, exc_info=retry_exc)
            capture_store_failure(mid, retry_exc)
            raise MatchUpdateFailed(mid) from retry_exc

    await _cache(match)
    return copy.deepcopy(match)


async def pop_previous(session: AsyncSession, mid: str) -> Optional[Dict[str, Any]]:
    """Restore the most recent history snapshot; ``None`` when there is none."""

    row = await session.get(Match, mid)
    if row is None:
        raise MatchNotFound(mid)
    history = list(row.history or [])
    if not history:
        return None

    previous = history.pop()
    restored = snapshot(previous)
    restored["id"] = row.id
    restored["code"] = row.code
    try:
        _write_row(row, restored, history)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Restoring match %s failed", mid, exc_info=exc)
        raise MatchUpdateFailed(mid) from exc

    await _cache(restored)
    return restored


async def history_depth(session: AsyncSession, mid: str) -> int:
    row = await session.get(Match, mid)
    return len(row.history or []) if row is not None else 0


async def delete_match(session: AsyncSession, id_or_code: str) -> bool:
    row = await _find_row(session, id_or_code)
    if row is None:
        return False
    mid, code = row.id, row.code
    await session.delete(row)
    await session.commit()
    await match_cache.invalidate_many((mid, code))
    match_locks.discard(mid)
    logger.info("Deleted match %s", mid)
    return True


async def get_match_by_court(
    session: AsyncSession, court_number: int
) -> Optional[Dict[str, Any]]:
    """The live match on a court, else the most recently finished one."""

    for completed in (False, True):
        stmt = (
            select(Match)
            .where(Match.court_number == court_number, Match.is_completed.is_(completed))
            .order_by(Match.created_at.desc())
            .limit(1)
        )
        row = (await session.execute(stmt)).scalars().first()
        if row is not None:
            return _state_from_row(row)
    return None


async def occupied_courts(session: AsyncSession) -> Dict[int, Match]:
    """Courts with a live match, mapped to the newest such match row."""

    stmt = (
        select(Match)
        .where(Match.court_number.is_not(None), Match.is_completed.is_(False))
        .order_by(Match.created_at.desc())
    )
    rows = (await session.execute(stmt)).scalars().all()
    courts: Dict[int, Match] = {}
    for row in rows:
        courts.setdefault(row.court_number, row)
    return courts


async def list_matches(
    session: AsyncSession,
    *,
    completed: Optional[bool] = None,
    court_number: Optional[int] = None,
    limit: int = 20,
    offset: int = 0,
) -> Sequence[Match]:
    """Newest-first page of match rows; fetches ``limit + 1`` to detect more."""

    stmt = select(Match)
    if completed is not None:
        stmt = stmt.where(Match.is_completed.is_(completed))
    if court_number is not None:
        stmt = stmt.where(Match.court_number == court_number)
    stmt = stmt.order_by(Match.created_at.desc(), Match.id).offset(offset).limit(limit + 1)
    return (await session.execute(stmt)).scalars().all()


def state_of(row: Match) -> Dict[str, Any]:
    return _state_from_row(row)
