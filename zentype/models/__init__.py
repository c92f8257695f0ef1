from .profile import Profile, ProfileStats
from .test_result import TestResult, TestResultSubmission
from .leaderboard import LeaderboardEntry, LeaderboardPeriod
from .test_content import TestContent

__all__ = [
    "Profile",
    "ProfileStats",
    "TestResult",
    "TestResultSubmission",
    "LeaderboardEntry",
    "LeaderboardPeriod",
    "TestContent",
]
