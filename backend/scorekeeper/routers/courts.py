from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import COURT_COUNT
from ..db import get_session
from ..exceptions import CourtNotFound
from ..schemas import CourtOut, MatchOut
from ..services import match_store
from .matches import overlay_response

router = APIRouter(prefix="/courts", tags=["courts"])


@router.get("", response_model=list[CourtOut])
async def list_courts(session: AsyncSession = Depends(get_session)):
    """Every numbered court with the live match on it, if any."""
    occupied = await match_store.occupied_courts(session)
    numbers = sorted(set(range(1, COURT_COUNT + 1)) | set(occupied))
    return [
        CourtOut(
            number=number,
            occupied=number in occupied,
            matchId=occupied[number].id if number in occupied else None,
            code=occupied[number].code if number in occupied else None,
        )
        for number in numbers
    ]


@router.get("/{number}", response_model=MatchOut)
async def court_match(number: int, session: AsyncSession = Depends(get_session)):
    match = await match_store.get_match_by_court(session, number)
    if match is None:
        raise CourtNotFound(number)
    return match


@router.get("/{number}/overlay")
async def court_overlay(number: int, session: AsyncSession = Depends(get_session)):
    match = await match_store.get_match_by_court(session, number)
    if match is None:
        raise CourtNotFound(number)
    return overlay_response(match)
