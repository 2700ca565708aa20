# backend/scorekeeper/routers/matches.py
import logging
from contextlib import nullcontext
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..cache import match_locks
from ..schemas import (
    CompleteIn,
    ImportantPointOut,
    MatchCreate,
    MatchIdOut,
    MatchOut,
    MatchSummaryOut,
    ScoreSummaryOut,
    TeamIn,
)
from .streams import broadcast
from ..scoring import (
    apply_pending_side_change,
    apply_point,
    finish_match,
    get_important_point,
    init_match,
    remove_point,
    summary,
    switch_server,
    toggle_sides,
    win_game,
    win_set,
)
from ..services import match_store
from ..services.overlay import flatten_match
from ..services.validation import (
    ValidationError,
    validate_court_number,
    validate_roster,
)
from ..exceptions import MatchNotFound, NothingToUndo, http_problem
from ..time_utils import coerce_utc

logger = logging.getLogger(__name__)

# Resource-only prefix; versioning is added in main.py
router = APIRouter(prefix="/matches", tags=["matches"])

Operation = Callable[[Dict[str, Any]], Dict[str, Any]]

OVERLAY_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Access-Control-Allow-Origin": "*",
}


def overlay_response(match: Dict[str, Any]) -> JSONResponse:
    """Overlay data sources expect a one-element array and never cache it."""

    return JSONResponse(content=[flatten_match(match)], headers=OVERLAY_HEADERS)


async def _mutate(
    session: AsyncSession,
    mid: str,
    operation: Operation,
    *,
    event: str,
) -> Dict[str, Any]:
    """Apply ``operation`` to a stored match under its lock and save the result.

    The pre-mutation snapshot goes onto the undo history.  Operations that
    leave the snapshot unchanged (e.g. a point on a completed match) are not
    written.
    """

    current = await match_store.require_match(session, mid)
    match_id = current["id"]

    async with match_locks.hold(match_id):
        current = await match_store.require_match(session, match_id)
        updated = operation(current)
        if updated == current:
            return current
        saved = await match_store.update_match(session, updated, previous=current)

    if saved.get("isCompleted") and not current.get("isCompleted"):
        logger.info("Match %s completed; winner %s", match_id, saved.get("winner"))
    await broadcast(match_id, {"event": event, "match": saved, "summary": summary(saved)})
    return saved


# POST /api/v0/matches
@router.post("", response_model=MatchIdOut, status_code=201)
async def create_match(body: MatchCreate, session: AsyncSession = Depends(get_session)):
    try:
        validate_roster(
            body.type,
            body.format,
            {
                "teamA": [p.name for p in body.teamA],
                "teamB": [p.name for p in body.teamB],
            },
        )
        court_number = validate_court_number(body.courtNumber)
    except ValidationError as e:
        raise http_problem(
            status_code=400,
            detail=e.detail,
            code="match_invalid",
        )

    # One create per court at a time, from the occupancy check to the insert
    court_guard = (
        match_locks.hold(f"court:{court_number}")
        if court_number is not None
        else nullcontext()
    )
    async with court_guard:
        if court_number is not None:
            occupied = await match_store.occupied_courts(session)
            if court_number in occupied:
                raise http_problem(
                    status_code=409,
                    detail=f"court {court_number} already has a live match",
                    code="court_occupied",
                )

        match = init_match(
            body.settings.model_dump(exclude_none=True) if body.settings else None,
            [p.model_dump(exclude_none=True) for p in body.teamA],
            [p.model_dump(exclude_none=True) for p in body.teamB],
            match_type=body.type,
            match_format=body.format,
            server=body.server,
            team_a_side=body.teamASide,
            court_number=court_number,
        )
        created = await match_store.create_match(session, match)

    await broadcast(created["id"], {"event": "created", "match": created, "summary": summary(created)})
    return MatchIdOut(id=created["id"], code=created["code"])


# GET /api/v0/matches
@router.get("", response_model=list[MatchSummaryOut])
async def list_matches(
    response: Response,
    completed: Optional[bool] = None,
    courtNumber: Optional[int] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    rows = await match_store.list_matches(
        session,
        completed=completed,
        court_number=courtNumber,
        limit=limit,
        offset=offset,
    )
    has_more = len(rows) > limit
    rows = rows[:limit]

    response.headers["X-Limit"] = str(limit)
    response.headers["X-Offset"] = str(offset)
    response.headers["X-Has-More"] = "true" if has_more else "false"
    if has_more:
        response.headers["X-Next-Offset"] = str(offset + limit)

    items = []
    for row in rows:
        state = match_store.state_of(row)
        items.append(
            MatchSummaryOut(
                id=row.id,
                code=row.code,
                type=row.type,
                format=row.format,
                courtNumber=row.court_number,
                teamA=[p.get("name", "") for p in state.get("teamA", {}).get("players", [])],
                teamB=[p.get("name", "") for p in state.get("teamB", {}).get("players", [])],
                isCompleted=row.is_completed,
                createdAt=coerce_utc(row.created_at),
                updatedAt=coerce_utc(row.updated_at),
                summary=ScoreSummaryOut(**summary(state)),
            )
        )
    return items


# GET /api/v0/matches/{mid}
@router.get("/{mid}", response_model=MatchOut)
async def get_match(mid: str, session: AsyncSession = Depends(get_session)):
    return await match_store.require_match(session, mid)


# DELETE /api/v0/matches/{mid}
@router.delete("/{mid}", status_code=204)
async def delete_match(mid: str, session: AsyncSession = Depends(get_session)):
    if not await match_store.delete_match(session, mid):
        raise MatchNotFound(mid)
    return Response(status_code=204)


# POST /api/v0/matches/{mid}/points
@router.post("/{mid}/points", response_model=MatchOut)
async def add_point(mid: str, body: TeamIn, session: AsyncSession = Depends(get_session)):
    # Ends flagged by the previous point are swapped before this one is scored
    def operation(match: Dict[str, Any]) -> Dict[str, Any]:
        return apply_point(apply_pending_side_change(match), body.team)

    return await _mutate(session, mid, operation, event="point")


# POST /api/v0/matches/{mid}/points/remove
@router.post("/{mid}/points/remove", response_model=MatchOut)
async def take_back_point(mid: str, body: TeamIn, session: AsyncSession = Depends(get_session)):
    return await _mutate(
        session, mid, lambda m: remove_point(m, body.team), event="point_removed"
    )


# POST /api/v0/matches/{mid}/games
@router.post("/{mid}/games", response_model=MatchOut)
async def award_game(mid: str, body: TeamIn, session: AsyncSession = Depends(get_session)):
    return await _mutate(session, mid, lambda m: win_game(m, body.team), event="game")


# POST /api/v0/matches/{mid}/sets
@router.post("/{mid}/sets", response_model=MatchOut)
async def award_set(mid: str, body: TeamIn, session: AsyncSession = Depends(get_session)):
    return await _mutate(session, mid, lambda m: win_set(m, body.team), event="set")


@router.post("/{mid}/server/switch", response_model=MatchOut)
async def switch_match_server(mid: str, session: AsyncSession = Depends(get_session)):
    return await _mutate(session, mid, switch_server, event="server_switched")


@router.post("/{mid}/sides/toggle", response_model=MatchOut)
async def toggle_match_sides(mid: str, session: AsyncSession = Depends(get_session)):
    return await _mutate(session, mid, toggle_sides, event="sides_toggled")


@router.post("/{mid}/complete", response_model=MatchOut)
async def complete_match(
    mid: str,
    body: Optional[CompleteIn] = None,
    session: AsyncSession = Depends(get_session),
):
    winner = body.winner if body else None
    return await _mutate(
        session, mid, lambda m: finish_match(m, winner), event="completed"
    )


@router.post("/{mid}/undo", response_model=MatchOut)
async def undo(mid: str, session: AsyncSession = Depends(get_session)):
    current = await match_store.require_match(session, mid)
    match_id = current["id"]
    async with match_locks.hold(match_id):
        restored = await match_store.pop_previous(session, match_id)
    if restored is None:
        raise NothingToUndo(match_id)
    await broadcast(match_id, {"event": "undo", "match": restored, "summary": summary(restored)})
    return restored


@router.get("/{mid}/important-point", response_model=ImportantPointOut)
async def important_point(mid: str, session: AsyncSession = Depends(get_session)):
    match = await match_store.require_match(session, mid)
    return get_important_point(match)


@router.get("/{mid}/overlay")
async def match_overlay(mid: str, session: AsyncSession = Depends(get_session)):
    match = await match_store.require_match(session, mid)
    return overlay_response(match)
