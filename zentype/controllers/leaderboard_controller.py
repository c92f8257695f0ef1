"""
Controlador de leaderboards - Endpoints de clasificación

Las tablas se mantienen en cada envío de resultado (all-time, semanal y mensual).
Este controlador solo las lee.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from zentype.core.dependencies import CurrentIdentity, Database
from zentype.models.leaderboard import LeaderboardEntry, LeaderboardPeriod
from zentype.services.leaderboard_service import LeaderboardService, MAX_LEADERBOARD_SIZE


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


class LeaderboardEntryResponse(BaseModel):
    """Entrada del leaderboard (usuario y estadísticas)."""
    position: int
    user_id: str
    username: str
    rank: str
    avg_wpm: int
    avg_accuracy: int
    best_wpm: int
    tests_completed: int
    last_test_date: Optional[datetime] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None


class LeaderboardResponse(BaseModel):
    """Leaderboard con sus entradas."""
    timeframe: LeaderboardPeriod
    entries: list[LeaderboardEntryResponse]
    count: int


class MyPositionResponse(BaseModel):
    position: Optional[int] = None
    entry: Optional[LeaderboardEntryResponse] = None


def _to_response(position: int, e: LeaderboardEntry) -> LeaderboardEntryResponse:
    return LeaderboardEntryResponse(
        position=position,
        user_id=e.user_id,
        username=e.username,
        rank=e.rank,
        avg_wpm=e.avg_wpm,
        avg_accuracy=e.avg_accuracy,
        best_wpm=e.best_wpm,
        tests_completed=e.tests_completed,
        last_test_date=e.last_test_date,
        period_start=e.period_start,
        period_end=e.period_end
    )


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    database: Database,
    timeframe: LeaderboardPeriod = Query(LeaderboardPeriod.ALL_TIME, description="all-time, week o month"),
    limit: int = Query(MAX_LEADERBOARD_SIZE, ge=1, le=MAX_LEADERBOARD_SIZE)
):
    """
    Obtener el leaderboard de un período, ordenado por WPM promedio.
    """
    leaderboard_service = LeaderboardService(database.get_db())
    entries = await leaderboard_service.get_leaderboard(timeframe, limit)

    return LeaderboardResponse(
        timeframe=timeframe,
        entries=[_to_response(idx + 1, e) for idx, e in enumerate(entries)],
        count=len(entries)
    )


@router.get("/me", response_model=MyPositionResponse)
async def get_my_leaderboard_position(
    identity: CurrentIdentity,
    database: Database,
    timeframe: LeaderboardPeriod = Query(LeaderboardPeriod.ALL_TIME, description="all-time, week o month")
):
    """
    Obtener la posición del usuario actual en el leaderboard.
    """
    leaderboard_service = LeaderboardService(database.get_db())
    result = await leaderboard_service.get_user_position(identity.user_id, timeframe)

    if not result:
        return MyPositionResponse()

    return MyPositionResponse(
        position=result["position"],
        entry=_to_response(result["position"], result["entry"])
    )
