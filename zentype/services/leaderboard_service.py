"""
LeaderboardService - serves the pre-computed leaderboard projections.

The projections are written by the submission pipeline, so reads are a
plain sorted query. Weekly/monthly entries are served as stored: an entry
from a past window stays visible until the user's next submission rolls it
over.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from zentype.models.leaderboard import LeaderboardEntry, LeaderboardPeriod
from zentype.repositories.leaderboard_repository import LeaderboardRepository

MAX_LEADERBOARD_SIZE = 100


class LeaderboardService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.leaderboard_repo = LeaderboardRepository(db)

    async def get_leaderboard(
        self,
        period: LeaderboardPeriod = LeaderboardPeriod.ALL_TIME,
        limit: int = MAX_LEADERBOARD_SIZE
    ) -> list[LeaderboardEntry]:
        """Top entries for a period, best first."""
        limit = max(1, min(limit, MAX_LEADERBOARD_SIZE))
        return await self.leaderboard_repo.get_top(period, limit)

    async def get_user_position(
        self,
        user_id: str,
        period: LeaderboardPeriod = LeaderboardPeriod.ALL_TIME
    ) -> Optional[dict]:
        """
        Get user's 1-based position in a leaderboard.

        Returns dict with position and entry, or None if the user has no entry.
        """
        entry = await self.leaderboard_repo.get_entry(period, user_id)
        if entry is None or entry.tests_completed <= 0:
            return None

        ahead = await self.leaderboard_repo.count_ahead_of(period, entry)
        return {
            "position": ahead + 1,
            "entry": entry
        }
