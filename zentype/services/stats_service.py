"""
Stats aggregation - running averages, rank tiers and period windows.

Everything here is pure: no I/O, no clock reads, no hidden state. The
submission service reads the current documents, calls into this module and
writes whatever comes back.
"""

import calendar
import math
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional

from zentype.models.leaderboard import LeaderboardEntry, LeaderboardPeriod
from zentype.models.profile import Profile, ProfileStats
from zentype.models.test_result import TestResultSubmission

# Lower bound inclusive, evaluated highest-first
RANK_TIERS = (
    (80, "S"),
    (60, "A"),
    (40, "B"),
    (20, "C"),
    (10, "D"),
)
DEFAULT_RANK = "E"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def rank_for(avg_wpm: float) -> str:
    for lower_bound, rank in RANK_TIERS:
        if avg_wpm >= lower_bound:
            return rank
    return DEFAULT_RANK


def aggregate(current: ProfileStats, wpm: float, accuracy: float) -> ProfileStats:
    """
    Fold one submission into a running aggregate.

    With a zeroed aggregate (fresh window or first test) the averages
    degenerate to the submission's own values.
    """
    count = current.tests_completed
    new_count = count + 1

    new_avg_wpm = round_half_up((current.avg_wpm * count + wpm) / new_count)
    new_avg_accuracy = round_half_up((current.avg_accuracy * count + accuracy) / new_count)

    return ProfileStats(
        rank=rank_for(new_avg_wpm),
        tests_completed=new_count,
        avg_wpm=new_avg_wpm,
        avg_accuracy=new_avg_accuracy,
        best_wpm=max(current.best_wpm, round_half_up(wpm)),
    )


def _as_aware(value: datetime) -> datetime:
    # Naive datetimes coming back from the store are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def get_period_bounds(
    period: LeaderboardPeriod,
    reference: datetime,
    tz: tzinfo = timezone.utc
) -> tuple[datetime, datetime]:
    """
    Get the local start and end of the window containing `reference`.

    Weeks run Sunday 00:00 to Saturday 23:59:59.999999, months run from
    day 1 00:00 to the last day 23:59:59.999999.
    """
    local_date = _as_aware(reference).astimezone(tz).date()

    if period == LeaderboardPeriod.WEEKLY:
        days_since_sunday = (local_date.weekday() + 1) % 7
        start_date = local_date - timedelta(days=days_since_sunday)
        end_date = start_date + timedelta(days=6)

    elif period == LeaderboardPeriod.MONTHLY:
        start_date = local_date.replace(day=1)
        last_day = calendar.monthrange(local_date.year, local_date.month)[1]
        end_date = local_date.replace(day=last_day)

    else:
        raise ValueError(f"Period {period.value} has no time window")

    return (
        datetime.combine(start_date, time.min, tzinfo=tz),
        datetime.combine(end_date, time.max, tzinfo=tz),
    )


def is_same_period(stored_start: Optional[datetime], current_start: datetime) -> bool:
    """An entry accumulates only if its window starts on/after the current one."""
    if stored_start is None:
        return False
    return _as_aware(stored_start) >= current_start


def stats_from_entry(entry: LeaderboardEntry) -> ProfileStats:
    return ProfileStats(
        rank=entry.rank,
        tests_completed=entry.tests_completed,
        avg_wpm=entry.avg_wpm,
        avg_accuracy=entry.avg_accuracy,
        best_wpm=entry.best_wpm,
    )


def build_leaderboard_entry(
    period: LeaderboardPeriod,
    profile: Profile,
    profile_stats: ProfileStats,
    existing: Optional[LeaderboardEntry],
    submission: TestResultSubmission,
    now: datetime,
    tz: tzinfo = timezone.utc
) -> LeaderboardEntry:
    """
    Compute the leaderboard projection for one period kind.

    All-time mirrors the updated profile stats. Weekly/monthly accumulate
    on the stored entry while it is in the current window, otherwise they
    restart from a zeroed aggregate seeded by this submission.
    """
    period_start = period_end = None

    if not period.is_windowed:
        stats = profile_stats
    else:
        period_start, period_end = get_period_bounds(period, now, tz)
        if existing is not None and is_same_period(existing.period_start, period_start):
            base = stats_from_entry(existing)
        else:
            base = ProfileStats()
        stats = aggregate(base, submission.wpm, submission.accuracy)

    return LeaderboardEntry(
        user_id=profile.id,
        username=profile.username,
        email=profile.email,
        rank=stats.rank,
        avg_wpm=stats.avg_wpm,
        avg_accuracy=stats.avg_accuracy,
        best_wpm=stats.best_wpm,
        tests_completed=stats.tests_completed,
        last_test_date=now,
        period_start=period_start,
        period_end=period_end,
    )
