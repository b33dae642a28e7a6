"""Analytics Service - dashboard metrics derived from a user's job applications

All metrics are computed in memory from the complete record set of one user.
Nothing here performs I/O except AnalyticsService, which loads the records and
lets any storage error propagate to the caller.
"""

import logging
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Tuple

from ..database.job_database import JobDatabase, get_job_database
from ..models.job_models import JobApplication, JobStatus
from ..models.analytics_models import (
    AnalyticsSnapshot,
    BasicStats,
    CategoryPerformance,
    ConversionFunnel,
    JobTypeShare,
    MonthlyCount,
    MonthlyTrendEntry,
    PriorityDistribution,
    RecentApplications,
    StatusCounts,
    StatusPercentages,
    WeeklyBucket,
)

logger = logging.getLogger(__name__)

VELOCITY_WEEKS = 12
TREND_MONTHS = 6
UNCATEGORIZED = "Uncategorized"
UNSPECIFIED_TYPE = "Not Specified"


def percentage(part: int, whole: int) -> float:
    """part/whole as a percentage rounded half-up to one decimal; 0 when whole is 0"""
    if whole <= 0:
        return 0.0
    value = Decimal((part / whole) * 100)
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _status_counts(records: Sequence[JobApplication]) -> StatusCounts:
    counts = Counter(job.status.value for job in records)
    return StatusCounts(
        pending=counts[JobStatus.PENDING.value],
        interview=counts[JobStatus.INTERVIEW.value],
        declined=counts[JobStatus.DECLINED.value],
    )


def _month_key(moment: datetime) -> Tuple[int, int]:
    return moment.year, moment.month


def _month_label(year: int, month: int) -> str:
    return date(year, month, 1).strftime("%b %Y")


def _latest_months(records: Sequence[JobApplication]) -> List[Tuple[Tuple[int, int], List[JobApplication]]]:
    """Group records by creation month; keep the most recent months, oldest first"""
    groups: Dict[Tuple[int, int], List[JobApplication]] = {}
    for job in records:
        groups.setdefault(_month_key(job.created_at), []).append(job)

    newest_first = sorted(groups.items(), key=lambda item: item[0], reverse=True)[:TREND_MONTHS]
    return list(reversed(newest_first))


# ============== Individual Metrics ==============

def weekly_applications(records: Sequence[JobApplication], now: datetime) -> List[WeeklyBucket]:
    """ISO-week buckets of records created in the trailing 12 weeks, oldest first"""
    since = now - timedelta(weeks=VELOCITY_WEEKS)
    buckets: Counter = Counter()
    for job in records:
        if job.created_at >= since:
            iso = job.created_at.isocalendar()
            buckets[(iso[0], iso[1])] += 1

    weeks = []
    for (year, week), count in sorted(buckets.items()):
        monday = date.fromisocalendar(year, week, 1)
        weeks.append(WeeklyBucket(week=f"Week {week}", date=monday.strftime("%b %d"), count=count))
    return weeks


def average_per_week(weeks: Sequence[WeeklyBucket]) -> float:
    """Applications per week over the full 12-week window, empty weeks included"""
    total = sum(bucket.count for bucket in weeks)
    value = Decimal(total / VELOCITY_WEEKS)
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def category_performance(records: Sequence[JobApplication]) -> List[CategoryPerformance]:
    """Status breakdown per category, largest categories first"""
    groups: Dict[str, List[JobApplication]] = {}
    for job in records:
        label = job.category.value if job.category else UNCATEGORIZED
        groups.setdefault(label, []).append(job)

    performance = []
    for label, jobs in groups.items():
        counts = _status_counts(jobs)
        performance.append(CategoryPerformance(
            category=label,
            total=len(jobs),
            pending=counts.pending,
            interview=counts.interview,
            declined=counts.declined,
            interview_rate=percentage(counts.interview, len(jobs)),
        ))

    performance.sort(key=lambda cat: (-cat.total, cat.category))
    return performance


def priority_distribution(records: Sequence[JobApplication]) -> PriorityDistribution:
    counts = Counter(job.priority.value for job in records if job.priority)
    return PriorityDistribution(low=counts["low"], medium=counts["medium"], high=counts["high"])


def recent_applications(records: Sequence[JobApplication], now: datetime) -> RecentApplications:
    """Counts for the last 7 and last 30 days; the windows overlap"""
    last_7 = now - timedelta(days=7)
    last_30 = now - timedelta(days=30)
    return RecentApplications(
        last_7_days=sum(1 for job in records if job.created_at >= last_7),
        last_30_days=sum(1 for job in records if job.created_at >= last_30),
    )


def job_type_distribution(records: Sequence[JobApplication]) -> List[JobTypeShare]:
    counts = Counter(job.job_type.value if job.job_type else UNSPECIFIED_TYPE for job in records)
    total = len(records)
    shares = [
        JobTypeShare(type=label, count=count, percentage=percentage(count, total))
        for label, count in counts.items()
    ]
    shares.sort(key=lambda share: (-share.count, share.type))
    return shares


def monthly_trend(records: Sequence[JobApplication]) -> List[MonthlyTrendEntry]:
    """Status breakdown for the six most recent months with applications, oldest first"""
    trend = []
    for (year, month), jobs in _latest_months(records):
        counts = _status_counts(jobs)
        trend.append(MonthlyTrendEntry(
            date=_month_label(year, month),
            total=len(jobs),
            pending=counts.pending,
            interview=counts.interview,
            declined=counts.declined,
        ))
    return trend


def conversion_funnel(status: StatusCounts, total: int) -> ConversionFunnel:
    # declined counts as a response; there is no offer stage
    return ConversionFunnel(
        applied=total,
        responded=status.interview + status.declined,
        interviewing=status.interview,
    )


# ============== Bundles ==============

def compute_analytics(records: Sequence[JobApplication], now: Optional[datetime] = None) -> AnalyticsSnapshot:
    """
    Compute the full analytics snapshot for one user's applications.

    Args:
        records: Every job application owned by the user
        now: Reference time for the rolling windows (defaults to current UTC time)

    Returns:
        AnalyticsSnapshot with every field populated; an empty record set yields
        zeroed counts and rates and empty lists.
    """
    now = now or datetime.now(timezone.utc)
    total = len(records)
    status = _status_counts(records)
    weeks = weekly_applications(records, now)

    return AnalyticsSnapshot(
        total_jobs=total,
        status_distribution=status,
        status_percentages=StatusPercentages(
            pending=percentage(status.pending, total),
            interview=percentage(status.interview, total),
            declined=percentage(status.declined, total),
        ),
        response_rate=percentage(status.interview + status.declined, total),
        success_rate=percentage(status.interview, total),
        avg_apps_per_week=average_per_week(weeks),
        category_performance=category_performance(records),
        priority_distribution=priority_distribution(records),
        recent_applications=recent_applications(records, now),
        job_type_distribution=job_type_distribution(records),
        weekly_applications=weeks,
        monthly_trend=monthly_trend(records),
        conversion_funnel=conversion_funnel(status, total),
    )


def compute_basic_stats(records: Sequence[JobApplication]) -> BasicStats:
    """Status totals plus application counts for the six most recent months"""
    return BasicStats(
        default_stats=_status_counts(records),
        monthly_applications=[
            MonthlyCount(date=_month_label(year, month), count=len(jobs))
            for (year, month), jobs in _latest_months(records)
        ],
    )


class AnalyticsService:
    """Loads a user's applications from storage and aggregates them"""

    def __init__(self, db: Optional[JobDatabase] = None):
        self.db = db or get_job_database()

    def _load_records(self, user_id: str) -> List[JobApplication]:
        return [JobApplication(**job) for job in self.db.get_jobs_for_user(user_id)]

    def get_advanced_analytics(self, user_id: str, now: Optional[datetime] = None) -> AnalyticsSnapshot:
        records = self._load_records(user_id)
        logger.debug(f"Computing analytics for {user_id} over {len(records)} applications")
        return compute_analytics(records, now)

    def get_basic_stats(self, user_id: str) -> BasicStats:
        return compute_basic_stats(self._load_records(user_id))
