"""
Unit tests for ProfileService and TestContentService
"""

import pytest

from zentype.core.exceptions import (
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    ValidationError,
)
from zentype.services.profile_service import ProfileService
from zentype.services.test_content_service import TestContentService


class TestProfileService:
    """Test suite for profile provisioning."""

    @pytest.mark.asyncio
    async def test_create_profile_defaults_username(self, test_db):
        service = ProfileService(test_db)

        # Act
        profile = await service.create_profile("user_1", "speedy.fingers@example.com")

        # Assert
        assert profile.username == "speedy.fingers"
        assert profile.stats.rank == "E"
        assert profile.stats.tests_completed == 0

    @pytest.mark.asyncio
    async def test_create_profile_with_username(self, test_db):
        service = ProfileService(test_db)

        profile = await service.create_profile("user_1", "a@example.com", username="  keyboard_cat ")

        assert profile.username == "keyboard_cat"

    @pytest.mark.asyncio
    async def test_create_profile_requires_email(self, test_db):
        service = ProfileService(test_db)

        with pytest.raises(ValidationError):
            await service.create_profile("user_1", None)

    @pytest.mark.asyncio
    async def test_create_profile_username_too_long(self, test_db):
        service = ProfileService(test_db)

        with pytest.raises(ValidationError) as exc_info:
            await service.create_profile("user_1", "a@example.com", username="x" * 33)

        assert exc_info.value.errors == ["Username must be at most 32 characters"]

    @pytest.mark.asyncio
    async def test_create_profile_twice(self, test_db, seeded_profile):
        service = ProfileService(test_db)

        with pytest.raises(ProfileAlreadyExistsError):
            await service.create_profile(seeded_profile["_id"], seeded_profile["email"])

    @pytest.mark.asyncio
    async def test_get_profile(self, test_db, seeded_profile):
        service = ProfileService(test_db)

        profile = await service.get_profile("test_user_123")

        assert profile.email == "test8@test.com"

    @pytest.mark.asyncio
    async def test_get_profile_not_found(self, test_db):
        service = ProfileService(test_db)

        with pytest.raises(ProfileNotFoundError):
            await service.get_profile("ghost")


class TestTestContentService:
    """Test suite for cursor pagination over practice texts."""

    @pytest.fixture
    async def seeded_contents(self, test_db, sample_test_contents):
        await test_db["test_contents"].insert_many(sample_test_contents)
        return sample_test_contents

    @pytest.mark.asyncio
    async def test_pages_follow_cursor(self, test_db, seeded_contents):
        service = TestContentService(test_db)

        # Act
        first, cursor = await service.list_tests(limit=4)
        second, last_cursor = await service.list_tests(limit=4, cursor=cursor)

        # Assert
        assert [t.id for t in first] == ["content_000", "content_001", "content_002", "content_003"]
        assert cursor == "content_003"
        assert [t.id for t in second] == ["content_004", "content_005"]
        assert last_cursor is None

    @pytest.mark.asyncio
    async def test_filters(self, test_db, seeded_contents):
        service = TestContentService(test_db)

        easy, _ = await service.list_tests(difficulty="Easy")
        tech_30, _ = await service.list_tests(category="Technology", time_limit=30)

        assert [t.id for t in easy] == ["content_000", "content_002", "content_004"]
        assert [t.id for t in tech_30] == ["content_000"]

    @pytest.mark.asyncio
    async def test_unknown_cursor_returns_first_page(self, test_db, seeded_contents):
        service = TestContentService(test_db)

        tests, _ = await service.list_tests(limit=2, cursor="does_not_exist")

        assert [t.id for t in tests] == ["content_000", "content_001"]

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, test_db, seeded_contents):
        service = TestContentService(test_db)

        tests, cursor = await service.list_tests(limit=500)

        assert len(tests) == 6
        assert cursor is None
