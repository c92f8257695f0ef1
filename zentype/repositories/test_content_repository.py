"""
TestContentRepository - pre-made texts for practice tests.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from zentype.models.test_content import TestContent


class TestContentRepository:
    __test__ = False  # not a pytest class

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["test_contents"]

    async def get_by_id(self, content_id: str) -> Optional[TestContent]:
        doc = await self.collection.find_one({"_id": content_id})
        return TestContent(**doc) if doc else None

    async def list_page(
        self,
        difficulty: Optional[str] = None,
        time_limit: Optional[int] = None,
        category: Optional[str] = None,
        after_id: Optional[str] = None,
        limit: int = 20
    ) -> list[TestContent]:
        """
        One page ordered by ID.

        Fetches `limit + 1` docs so the caller can tell if there is a next page.
        """
        query = {}
        if difficulty:
            query["difficulty"] = difficulty
        if time_limit is not None:
            query["time_limit"] = time_limit
        if category:
            query["category"] = category
        if after_id:
            query["_id"] = {"$gt": after_id}

        cursor = self.collection.find(query).sort("_id", 1).limit(limit + 1)
        docs = await cursor.to_list(length=limit + 1)
        return [TestContent(**doc) for doc in docs]
