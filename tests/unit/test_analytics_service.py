"""Unit Tests for the Analytics Service"""

import random
from datetime import timedelta
from unittest.mock import Mock

import pytest

from jobtracker.api.services.analytics_service import (
    AnalyticsService,
    compute_analytics,
    compute_basic_stats,
    percentage,
    weekly_applications,
    average_per_week,
)
from jobtracker.api.models.job_models import JobStatus
from tests.conftest import NOW, make_job


class TestPercentage:
    """Test one-decimal percentage rounding"""

    def test_zero_total(self):
        assert percentage(0, 0) == 0.0
        assert percentage(5, 0) == 0.0

    def test_rounds_to_one_decimal(self):
        assert percentage(1, 3) == 33.3
        assert percentage(2, 3) == 66.7
        assert percentage(1, 6) == 16.7

    def test_rounds_half_up(self):
        """6.25 rounds to 6.3, not to even"""
        assert percentage(1, 16) == 6.3
        assert percentage(1, 8) == 12.5

    def test_whole(self):
        assert percentage(4, 4) == 100.0


class TestEmptyRecordSet:
    """Test analytics over a user with no applications"""

    def test_everything_zeroed(self):
        snapshot = compute_analytics([], now=NOW)

        assert snapshot.total_jobs == 0
        assert snapshot.status_distribution.pending == 0
        assert snapshot.status_percentages.interview == 0.0
        assert snapshot.response_rate == 0.0
        assert snapshot.success_rate == 0.0
        assert snapshot.avg_apps_per_week == 0.0
        assert snapshot.recent_applications.last_7_days == 0
        assert snapshot.conversion_funnel.applied == 0

    def test_lists_empty(self):
        snapshot = compute_analytics([], now=NOW)

        assert snapshot.category_performance == []
        assert snapshot.job_type_distribution == []
        assert snapshot.weekly_applications == []
        assert snapshot.monthly_trend == []

    def test_wire_format_is_complete(self):
        """Empty snapshot still serializes every field"""
        data = compute_analytics([], now=NOW).model_dump(by_alias=True)

        assert data["totalJobs"] == 0
        assert data["statusDistribution"] == {"pending": 0, "interview": 0, "declined": 0}
        assert data["recentApplications"] == {"last7Days": 0, "last30Days": 0}
        assert data["conversionFunnel"] == {"applied": 0, "responded": 0, "interviewing": 0}


class TestStatusMetrics:
    """Test status distribution and derived rates"""

    @pytest.fixture
    def records(self):
        return (
            [make_job(status="pending") for _ in range(3)]
            + [make_job(status="interview") for _ in range(2)]
            + [make_job(status="declined")]
        )

    def test_distribution(self, records):
        snapshot = compute_analytics(records, now=NOW)

        assert snapshot.total_jobs == 6
        assert snapshot.status_distribution.pending == 3
        assert snapshot.status_distribution.interview == 2
        assert snapshot.status_distribution.declined == 1

    def test_percentages(self, records):
        snapshot = compute_analytics(records, now=NOW)

        assert snapshot.status_percentages.pending == 50.0
        assert snapshot.status_percentages.interview == 33.3
        assert snapshot.status_percentages.declined == 16.7

    def test_rates(self, records):
        snapshot = compute_analytics(records, now=NOW)

        assert snapshot.response_rate == 50.0
        assert snapshot.success_rate == 33.3

    def test_conversion_funnel(self, records):
        funnel = compute_analytics(records, now=NOW).conversion_funnel

        assert funnel.applied == 6
        assert funnel.responded == 3
        assert funnel.interviewing == 2

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_distribution_properties(self, seed):
        """Counts sum to the total; rates follow from the counts"""
        rng = random.Random(seed)
        records = [
            make_job(status=rng.choice(list(JobStatus)))
            for _ in range(rng.randint(1, 60))
        ]
        snapshot = compute_analytics(records, now=NOW)
        dist = snapshot.status_distribution

        assert dist.pending + dist.interview + dist.declined == snapshot.total_jobs
        assert snapshot.status_percentages.declined == percentage(dist.declined, len(records))
        assert snapshot.response_rate == percentage(dist.interview + dist.declined, len(records))


class TestCategoryPerformance:
    """Test per-category breakdown"""

    def test_sorted_by_total_descending(self):
        records = (
            [make_job(category="design") for _ in range(2)]
            + [make_job(category="software-engineering", status="interview")]
            + [make_job(category="software-engineering") for _ in range(2)]
        )
        performance = compute_analytics(records, now=NOW).category_performance

        assert [p.category for p in performance] == ["software-engineering", "design"]
        assert performance[0].total == 3
        assert performance[0].interview == 1
        assert performance[0].interview_rate == 33.3

    def test_missing_category_is_uncategorized(self):
        records = [make_job(category=None), make_job(category=None, status="interview")]
        performance = compute_analytics(records, now=NOW).category_performance

        assert len(performance) == 1
        assert performance[0].category == "Uncategorized"
        assert performance[0].interview_rate == 50.0

    def test_ties_ordered_by_name(self):
        records = [make_job(category="marketing"), make_job(category="design")]
        performance = compute_analytics(records, now=NOW).category_performance

        assert [p.category for p in performance] == ["design", "marketing"]


class TestJobTypeDistribution:
    """Test job-type shares"""

    def test_counts_and_percentages(self):
        records = (
            [make_job(job_type="full-time") for _ in range(3)]
            + [make_job(job_type="remote")]
            + [make_job(job_type=None)]
        )
        shares = compute_analytics(records, now=NOW).job_type_distribution

        assert shares[0].type == "full-time"
        assert shares[0].count == 3
        assert shares[0].percentage == 60.0
        assert {s.type for s in shares} == {"full-time", "remote", "Not Specified"}

    def test_priority_distribution(self):
        records = [make_job(priority="high"), make_job(priority="high"), make_job(priority="low")]
        priorities = compute_analytics(records, now=NOW).priority_distribution

        assert priorities.high == 2
        assert priorities.medium == 0
        assert priorities.low == 1


class TestWeeklyVelocity:
    """Test ISO-week buckets and the 12-week average"""

    def test_buckets_by_iso_week(self):
        records = [
            make_job(created_at=NOW),
            make_job(created_at=NOW - timedelta(days=1)),
            make_job(created_at=NOW - timedelta(days=7)),
        ]
        weeks = weekly_applications(records, NOW)

        assert [(w.week, w.date, w.count) for w in weeks] == [
            ("Week 24", "Jun 09", 1),
            ("Week 25", "Jun 16", 2),
        ]

    def test_excludes_records_older_than_twelve_weeks(self):
        records = [
            make_job(created_at=NOW - timedelta(weeks=13)),
            make_job(created_at=NOW - timedelta(days=2)),
        ]
        weeks = weekly_applications(records, NOW)

        assert sum(w.count for w in weeks) == 1

    def test_average_uses_fixed_denominator(self):
        """Average divides by 12 even when only one week has applications"""
        records = [make_job(created_at=NOW) for _ in range(6)]
        snapshot = compute_analytics(records, now=NOW)

        assert len(snapshot.weekly_applications) == 1
        assert snapshot.avg_apps_per_week == 0.5

    def test_average_rounds_half_up(self):
        weeks = weekly_applications([make_job(created_at=NOW) for _ in range(3)], NOW)
        assert average_per_week(weeks) == 0.3


class TestRecentApplications:
    """Test the overlapping 7- and 30-day windows"""

    def test_windows_overlap(self):
        records = [
            make_job(created_at=NOW - timedelta(days=3)),
            make_job(created_at=NOW - timedelta(days=10)),
            make_job(created_at=NOW - timedelta(days=40)),
        ]
        recent = compute_analytics(records, now=NOW).recent_applications

        assert recent.last_7_days == 1
        assert recent.last_30_days == 2


class TestMonthlyTrend:
    """Test the six-month status trend"""

    @pytest.fixture
    def eight_months(self):
        records = []
        for months_back in range(8):
            month = 6 - months_back
            year = 2025 if month > 0 else 2024
            month = month if month > 0 else month + 12
            created = NOW.replace(year=year, month=month, day=5)
            records.append(make_job(created_at=created, status="interview" if months_back == 0 else "pending"))
        return records

    def test_keeps_six_latest_months_ascending(self, eight_months):
        trend = compute_analytics(eight_months, now=NOW).monthly_trend

        assert [entry.date for entry in trend] == [
            "Jan 2025", "Feb 2025", "Mar 2025", "Apr 2025", "May 2025", "Jun 2025",
        ]

    def test_status_breakdown(self, eight_months):
        latest = compute_analytics(eight_months, now=NOW).monthly_trend[-1]

        assert latest.total == 1
        assert latest.interview == 1
        assert latest.pending == 0

    def test_skips_empty_months(self):
        records = [
            make_job(created_at=NOW.replace(month=1, day=10)),
            make_job(created_at=NOW.replace(month=4, day=10)),
            make_job(created_at=NOW.replace(month=4, day=11)),
        ]
        trend = compute_analytics(records, now=NOW).monthly_trend

        assert [(e.date, e.total) for e in trend] == [("Jan 2025", 1), ("Apr 2025", 2)]

    def test_basic_stats(self, eight_months):
        stats = compute_basic_stats(eight_months)

        assert stats.default_stats.pending == 7
        assert stats.default_stats.interview == 1
        assert len(stats.monthly_applications) == 6
        assert stats.monthly_applications[-1].date == "Jun 2025"


class TestAnalyticsService:
    """Test loading records from storage"""

    def test_reads_only_the_users_jobs(self, db, user_id):
        other_id = db.create_user("Other", "other@example.com")
        db.insert_job(user_id, {"company": "A", "position": "Engineer", "status": "interview"}, created_at=NOW)
        db.insert_job(user_id, {"company": "B", "position": "Engineer"}, created_at=NOW)
        db.insert_job(other_id, {"company": "C", "position": "Engineer"}, created_at=NOW)

        snapshot = AnalyticsService(db).get_advanced_analytics(user_id, now=NOW)

        assert snapshot.total_jobs == 2
        assert snapshot.success_rate == 50.0
        assert snapshot.recent_applications.last_7_days == 2

    def test_storage_error_propagates(self):
        mock_db = Mock()
        mock_db.get_jobs_for_user.side_effect = RuntimeError("disk I/O error")

        service = AnalyticsService(mock_db)

        with pytest.raises(RuntimeError, match="disk I/O error"):
            service.get_advanced_analytics("user_x", now=NOW)
