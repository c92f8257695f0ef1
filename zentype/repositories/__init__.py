from .profile_repository import ProfileRepository
from .test_result_repository import TestResultRepository
from .leaderboard_repository import LeaderboardRepository
from .test_content_repository import TestContentRepository

__all__ = [
    "ProfileRepository",
    "TestResultRepository",
    "LeaderboardRepository",
    "TestContentRepository",
]
