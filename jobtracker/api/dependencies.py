"""Dependency injection for FastAPI"""

from typing import Optional
import logging

from fastapi import Depends, Header, Response

from .config import get_settings
from .database import JobDatabase, get_job_database
from .errors import AuthenticationError, PermissionDeniedError
from .models.user_models import CurrentUser, UserRole
from .services.analytics_service import AnalyticsService
from .services.job_service import JobService
from .services.activity_service import ActivityService
from .services.template_service import TemplateService
from .services.rate_limiter import AIRequestLimiter, AIUsageDecision

logger = logging.getLogger(__name__)


def get_db() -> JobDatabase:
    return get_job_database()


def get_current_user(
    x_user_id: Optional[str] = Header(None, description="User id set by the authenticating gateway"),
    db: JobDatabase = Depends(get_db),
) -> CurrentUser:
    """Resolve the caller from the identity header set upstream"""
    if not x_user_id:
        raise AuthenticationError("Authentication invalid")

    user = db.get_user(x_user_id)
    if not user:
        logger.warning(f"Unknown user id in request: {x_user_id}")
        raise AuthenticationError("Authentication invalid")

    return CurrentUser(user_id=user["id"], role=UserRole(user["role"]))


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise PermissionDeniedError("Access denied. Admin privileges required.")
    return user


def get_job_service(db: JobDatabase = Depends(get_db)) -> JobService:
    return JobService(db)


def get_activity_service(db: JobDatabase = Depends(get_db)) -> ActivityService:
    return ActivityService(db)


def get_template_service(db: JobDatabase = Depends(get_db)) -> TemplateService:
    return TemplateService(db)


def get_analytics_service(db: JobDatabase = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


def get_ai_limiter(db: JobDatabase = Depends(get_db)) -> AIRequestLimiter:
    settings = get_settings()
    return AIRequestLimiter(db, limit=settings.ai_request_limit, window_hours=settings.ai_window_hours)


def enforce_ai_limit(
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    limiter: AIRequestLimiter = Depends(get_ai_limiter),
) -> AIUsageDecision:
    """Consume one AI request for the caller or reject with 429"""
    decision = limiter.check(user)
    if decision.remaining is not None:
        response.headers["X-AI-Remaining-Requests"] = str(decision.remaining)
    return decision
