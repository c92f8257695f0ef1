from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ProfileStats(BaseModel):
    """Estadísticas agregadas del usuario (se recalculan en cada envío)"""

    rank: str = "E"  # S | A | B | C | D | E
    tests_completed: int = 0
    avg_wpm: int = 0
    avg_accuracy: int = 0
    best_wpm: int = 0


class Profile(BaseModel):
    id: str = Field(..., alias="_id")  # ID del usuario (sub del token)
    username: str
    email: Optional[str] = None

    stats: ProfileStats = ProfileStats()

    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class ProfileCreate(BaseModel):
    username: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    username: str
    email: Optional[str] = None
    stats: ProfileStats
    created_at: datetime
