"""
ProfileRepository - MongoDB access for profiles collection.
"""

from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from zentype.core.exceptions import ProfileAlreadyExistsError
from zentype.database import Transaction
from zentype.models.profile import Profile, ProfileStats


class ProfileRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["profiles"]

    async def get_by_id(self, user_id: str, tx: Optional[Transaction] = None) -> Optional[Profile]:
        """Get profile by user ID, inside `tx` when given."""
        if tx is not None:
            doc = await tx.find_one(self.collection, {"_id": user_id})
        else:
            doc = await self.collection.find_one({"_id": user_id})
        return Profile(**doc) if doc else None

    async def create(self, user_id: str, username: str, email: Optional[str]) -> Profile:
        """Provision a profile with zeroed stats."""
        profile = Profile(
            _id=user_id,
            username=username,
            email=email,
            stats=ProfileStats(),
            created_at=datetime.now(timezone.utc),
        )

        try:
            await self.collection.insert_one(profile.model_dump(by_alias=True))
        except DuplicateKeyError:
            raise ProfileAlreadyExistsError(f"Profile already exists for user {user_id}")

        return profile

    async def update_stats(
        self,
        user_id: str,
        stats: ProfileStats,
        updated_at: datetime,
        tx: Optional[Transaction] = None
    ) -> bool:
        """Overwrite the stats sub-document. Returns False if no profile matched."""
        query = {"_id": user_id}
        update = {"$set": {"stats": stats.model_dump(), "updated_at": updated_at}}

        if tx is not None:
            matched = await tx.update_one(self.collection, query, update)
        else:
            result = await self.collection.update_one(query, update)
            matched = result.matched_count

        return matched > 0

    async def exists(self, user_id: str) -> bool:
        """Check if profile exists."""
        count = await self.collection.count_documents({"_id": user_id}, limit=1)
        return count > 0
