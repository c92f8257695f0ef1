from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class LeaderboardPeriod(str, Enum):
    """Tipos de ventana de tiempo de un leaderboard"""

    ALL_TIME = "all-time"
    WEEKLY = "week"
    MONTHLY = "month"

    @property
    def collection_name(self) -> str:
        return {
            LeaderboardPeriod.ALL_TIME: "leaderboard",
            LeaderboardPeriod.WEEKLY: "leaderboard_weekly",
            LeaderboardPeriod.MONTHLY: "leaderboard_monthly",
        }[self]

    @property
    def is_windowed(self) -> bool:
        return self is not LeaderboardPeriod.ALL_TIME


class LeaderboardEntry(BaseModel):
    """Entrada en una tabla de clasificación (copia desnormalizada de las stats)"""

    user_id: str = Field(..., alias="_id")
    username: str = "Unknown User"
    email: Optional[str] = None

    rank: str = "E"
    avg_wpm: int = 0
    avg_accuracy: int = 0
    best_wpm: int = 0
    tests_completed: int = 0

    last_test_date: Optional[datetime] = None

    # Solo weekly / monthly
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None

    class Config:
        populate_by_name = True
