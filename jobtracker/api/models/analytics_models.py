"""Pydantic models for the analytics dashboard"""

from typing import List
from pydantic import Field

from .base import CamelModel


class StatusCounts(CamelModel):
    """Count of applications per status"""
    pending: int = 0
    interview: int = 0
    declined: int = 0


class StatusPercentages(CamelModel):
    """Share of applications per status, one decimal place"""
    pending: float = 0.0
    interview: float = 0.0
    declined: float = 0.0


class PriorityDistribution(CamelModel):
    low: int = 0
    medium: int = 0
    high: int = 0


class CategoryPerformance(CamelModel):
    """Status breakdown for a single job category"""
    category: str
    total: int
    pending: int
    interview: int
    declined: int
    interview_rate: float


class RecentApplications(CamelModel):
    """Overlapping recency windows"""
    last_7_days: int = Field(0, alias="last7Days")
    last_30_days: int = Field(0, alias="last30Days")


class JobTypeShare(CamelModel):
    type: str
    count: int
    percentage: float


class WeeklyBucket(CamelModel):
    """Applications created during one ISO week"""
    week: str
    date: str
    count: int


class MonthlyTrendEntry(CamelModel):
    """Status breakdown of applications created during one calendar month"""
    date: str
    total: int
    pending: int
    interview: int
    declined: int


class MonthlyCount(CamelModel):
    date: str
    count: int


class ConversionFunnel(CamelModel):
    """
    applied -> responded -> interviewing.

    "responded" counts declined applications as responses, and there is no
    separate offer stage.
    """
    applied: int = 0
    responded: int = 0
    interviewing: int = 0


class AnalyticsSnapshot(CamelModel):
    """Derived metrics over one user's complete set of job applications"""
    total_jobs: int = 0
    status_distribution: StatusCounts = Field(default_factory=StatusCounts)
    status_percentages: StatusPercentages = Field(default_factory=StatusPercentages)
    response_rate: float = 0.0
    success_rate: float = 0.0
    avg_apps_per_week: float = 0.0
    category_performance: List[CategoryPerformance] = Field(default_factory=list)
    priority_distribution: PriorityDistribution = Field(default_factory=PriorityDistribution)
    recent_applications: RecentApplications = Field(default_factory=RecentApplications)
    job_type_distribution: List[JobTypeShare] = Field(default_factory=list)
    weekly_applications: List[WeeklyBucket] = Field(default_factory=list)
    monthly_trend: List[MonthlyTrendEntry] = Field(default_factory=list)
    conversion_funnel: ConversionFunnel = Field(default_factory=ConversionFunnel)


class BasicStats(CamelModel):
    """Status totals plus monthly application counts"""
    default_stats: StatusCounts = Field(default_factory=StatusCounts)
    monthly_applications: List[MonthlyCount] = Field(default_factory=list)
