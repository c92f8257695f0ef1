"""
SubmissionService - records a finished typing test.

One submission is one MongoDB transaction:
1. Read the profile and the windowed leaderboard entries (reads first).
2. Compute the new aggregates (pure, see stats_service).
3. Insert the raw result, overwrite the profile stats and upsert every
   configured leaderboard projection.
Either everything commits or nothing is visible.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Optional

from zentype.core.exceptions import ProfileNotFoundError, StorageError
from zentype.database import MongoDatabase
from zentype.models.leaderboard import LeaderboardPeriod
from zentype.models.profile import ProfileStats
from zentype.models.test_result import TestResult, TestResultSubmission
from zentype.repositories.leaderboard_repository import LeaderboardRepository
from zentype.repositories.profile_repository import ProfileRepository
from zentype.repositories.test_result_repository import TestResultRepository
from zentype.services.stats_service import aggregate, build_leaderboard_entry

logger = logging.getLogger(__name__)

DEFAULT_PROJECTIONS = (
    LeaderboardPeriod.ALL_TIME,
    LeaderboardPeriod.WEEKLY,
    LeaderboardPeriod.MONTHLY,
)


def parse_projections(names: Iterable[str]) -> tuple[LeaderboardPeriod, ...]:
    """Turn configured names into periods; unknown names are a config error."""
    projections = []
    for name in names:
        try:
            period = LeaderboardPeriod(name)
        except ValueError:
            raise ValueError(f"Unknown leaderboard projection: {name!r}")
        if period not in projections:
            projections.append(period)
    return tuple(projections)


@dataclass(frozen=True)
class SubmissionResult:
    test_result_id: str
    stats: ProfileStats


class SubmissionService:
    def __init__(
        self,
        database: MongoDatabase,
        projections: Iterable[LeaderboardPeriod] = DEFAULT_PROJECTIONS,
        tz: tzinfo = timezone.utc
    ):
        self.database = database
        self.projections = tuple(projections)
        self.tz = tz

        db = database.get_db()
        self.profile_repo = ProfileRepository(db)
        self.result_repo = TestResultRepository(db)
        self.leaderboard_repo = LeaderboardRepository(db)

    async def submit(
        self,
        user_id: str,
        submission: TestResultSubmission,
        now: Optional[datetime] = None
    ) -> SubmissionResult:
        """
        Record a validated submission for a verified user.

        Raises:
            ProfileNotFoundError: the user has no profile; nothing is written.
            TransactionConflictError: the store aborted the commit; retryable.
            StorageUnavailableError / StorageError: other store failures.
        """
        now = now or datetime.now(timezone.utc)
        new_stats = None

        try:
            async with self.database.transaction() as tx:
                # STEP 1: todas las lecturas antes de cualquier escritura
                profile = await self.profile_repo.get_by_id(user_id, tx=tx)
                if profile is None:
                    raise ProfileNotFoundError(user_id)

                existing = {}
                for period in self.projections:
                    if period.is_windowed:
                        existing[period] = await self.leaderboard_repo.get_entry(period, user_id, tx=tx)

                # STEP 2: cálculo puro
                new_stats = aggregate(profile.stats, submission.wpm, submission.accuracy)
                entries = [
                    (period, build_leaderboard_entry(
                        period,
                        profile,
                        new_stats,
                        existing.get(period),
                        submission,
                        now,
                        self.tz
                    ))
                    for period in self.projections
                ]

                # STEP 3: escrituras
                result = TestResult(
                    user_id=user_id,
                    wpm=submission.wpm,
                    accuracy=submission.accuracy,
                    error_count=submission.error_count,
                    time_taken_seconds=submission.time_taken_seconds,
                    text_length=submission.text_length,
                    user_input_text=submission.user_input_text,
                    test_type=submission.test_type,
                    difficulty=submission.difficulty,
                    source_test_id=submission.source_test_id,
                    created_at=now,
                )
                result_id = await self.result_repo.create(result, tx=tx)

                if not await self.profile_repo.update_stats(user_id, new_stats, now, tx=tx):
                    raise ProfileNotFoundError(user_id)

                for period, entry in entries:
                    await self.leaderboard_repo.upsert_entry(period, entry, tx=tx)

        except ProfileNotFoundError:
            logger.warning(f"Profile not found for submission, nothing written. user_id={user_id}")
            raise
        except StorageError as e:
            logger.error(
                f"Submission transaction failed. user_id={user_id} "
                f"attempted_stats={new_stats.model_dump() if new_stats else None} "
                f"retryable={e.retryable}",
                exc_info=True
            )
            raise

        logger.info(
            f"Test result saved. user_id={user_id} result_id={result_id} "
            f"stats={new_stats.model_dump()} projections={[p.value for p in self.projections]}"
        )
        return SubmissionResult(test_result_id=result_id, stats=new_stats)
