"""API Services"""

from .analytics_service import AnalyticsService, compute_analytics, compute_basic_stats
from .rate_limiter import AIRequestLimiter, AIUsageDecision
from .job_service import JobService
from .activity_service import ActivityService
from .template_service import TemplateService
from .ai_service import AIAssistantService

__all__ = [
    "AnalyticsService",
    "compute_analytics",
    "compute_basic_stats",
    "AIRequestLimiter",
    "AIUsageDecision",
    "JobService",
    "ActivityService",
    "TemplateService",
    "AIAssistantService",
]
