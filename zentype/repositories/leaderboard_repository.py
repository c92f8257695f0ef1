"""
LeaderboardRepository - one collection per period kind, one document per user.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from zentype.database import Transaction
from zentype.models.leaderboard import LeaderboardEntry, LeaderboardPeriod

# Orden de la tabla: promedio, mejor marca y después cantidad de tests
LEADERBOARD_SORT = [
    ("avg_wpm", -1),
    ("best_wpm", -1),
    ("tests_completed", -1),
]


class LeaderboardRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    def _collection(self, period: LeaderboardPeriod):
        return self.db[period.collection_name]

    async def get_entry(
        self,
        period: LeaderboardPeriod,
        user_id: str,
        tx: Optional[Transaction] = None
    ) -> Optional[LeaderboardEntry]:
        collection = self._collection(period)

        if tx is not None:
            doc = await tx.find_one(collection, {"_id": user_id})
        else:
            doc = await collection.find_one({"_id": user_id})

        return LeaderboardEntry(**doc) if doc else None

    async def upsert_entry(
        self,
        period: LeaderboardPeriod,
        entry: LeaderboardEntry,
        tx: Optional[Transaction] = None
    ) -> None:
        """
        Merge the entry into the stored document.

        Fields not present in `entry` (None) are left untouched.
        """
        collection = self._collection(period)
        fields = entry.model_dump(exclude={"user_id"}, exclude_none=True)

        query = {"_id": entry.user_id}
        update = {"$set": fields, "$setOnInsert": {"created_at": entry.last_test_date}}

        if tx is not None:
            await tx.update_one(collection, query, update, upsert=True)
        else:
            await collection.update_one(query, update, upsert=True)

    async def get_top(self, period: LeaderboardPeriod, limit: int = 100) -> list[LeaderboardEntry]:
        """Entries with at least one test, best first."""
        cursor = self._collection(period).find(
            {"tests_completed": {"$gt": 0}}
        ).sort(LEADERBOARD_SORT).limit(limit)

        docs = await cursor.to_list(length=limit)
        return [LeaderboardEntry(**doc) for doc in docs]

    async def count_ahead_of(self, period: LeaderboardPeriod, entry: LeaderboardEntry) -> int:
        """How many entries sort strictly before `entry`."""
        return await self._collection(period).count_documents({
            "tests_completed": {"$gt": 0},
            "$or": [
                {"avg_wpm": {"$gt": entry.avg_wpm}},
                {"avg_wpm": entry.avg_wpm, "best_wpm": {"$gt": entry.best_wpm}},
                {
                    "avg_wpm": entry.avg_wpm,
                    "best_wpm": entry.best_wpm,
                    "tests_completed": {"$gt": entry.tests_completed},
                },
            ],
        })
