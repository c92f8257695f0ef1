"""
ProfileService - account provisioning and profile lookups.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from zentype.core.exceptions import ProfileNotFoundError, ValidationError
from zentype.models.profile import Profile
from zentype.repositories.profile_repository import ProfileRepository

MAX_USERNAME_LENGTH = 32


class ProfileService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.profile_repo = ProfileRepository(db)

    async def create_profile(
        self,
        user_id: str,
        email: Optional[str],
        username: Optional[str] = None
    ) -> Profile:
        """
        Provision a profile with zeroed stats.

        Username falls back to the email local part.
        Raises ProfileAlreadyExistsError if the user already has one.
        """
        if not email:
            raise ValidationError(["Email claim is required to create a profile"])

        username = (username or "").strip() or email.split("@")[0]
        if len(username) > MAX_USERNAME_LENGTH:
            raise ValidationError([f"Username must be at most {MAX_USERNAME_LENGTH} characters"])

        return await self.profile_repo.create(user_id, username, email)

    async def get_profile(self, user_id: str) -> Profile:
        profile = await self.profile_repo.get_by_id(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile
