"""AI request limiter - per-user daily quota for AI-assisted endpoints"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

from ..errors import AILimitExceededError, StorageFailureError
from ..models.user_models import AIUsageCounter, CurrentUser

logger = logging.getLogger(__name__)


class AIUsageStore(Protocol):
    """Storage for per-user AI usage counters, keyed by user id"""

    def update_ai_usage(
        self,
        user_id: str,
        update: Callable[[AIUsageCounter], AIUsageCounter],
    ) -> AIUsageCounter:
        """Apply `update` to the stored counter atomically and return the result.

        If `update` raises, nothing is written. Raises LookupError for unknown users.
        """
        ...


@dataclass
class AIUsageDecision:
    """Outcome of an allowed request"""
    allowed: bool
    remaining: Optional[int] = None  # None means unlimited


class AIRequestLimiter:
    """
    Allows each standard user `limit` AI requests per rolling window.

    Administrators bypass the limiter entirely and their counter is never touched.
    For everyone else the window reset is applied before the limit check, so a
    stale counter never rejects a request once its window has elapsed.

    Reset, check and increment run as one store transaction, so concurrent
    requests of one user can never exceed the limit.
    """

    def __init__(self, store: AIUsageStore, limit: int = 2, window_hours: int = 24):
        self.store = store
        self.limit = limit
        self.window_hours = window_hours

    def check(self, user: CurrentUser, now: Optional[datetime] = None) -> AIUsageDecision:
        """
        Consume one AI request for the user.

        Args:
            user: The authenticated caller
            now: Current time (defaults to current UTC time)

        Returns:
            AIUsageDecision with the requests left in the window

        Raises:
            AILimitExceededError: the user has no requests left; count is unchanged
            StorageFailureError: the counter could not be read or written
        """
        if user.is_admin:
            return AIUsageDecision(allowed=True, remaining=None)

        now = now or datetime.now(timezone.utc)

        try:
            counter = self.store.update_ai_usage(
                user.user_id, lambda current: self._advance(user.user_id, current, now)
            )
        except AILimitExceededError:
            raise
        except Exception as e:
            logger.error(f"AI limit check failed for {user.user_id}: {e}")
            raise StorageFailureError("Failed to check AI request limit", original_error=e) from e

        return AIUsageDecision(allowed=True, remaining=self.limit - counter.ai_request_count)

    def _advance(self, user_id: str, counter: AIUsageCounter, now: datetime) -> AIUsageCounter:
        """Next counter value for one more request, or AILimitExceededError"""
        hours_since_reset = (now - counter.ai_request_reset_date) / timedelta(hours=1)

        if hours_since_reset >= self.window_hours:
            counter = AIUsageCounter(ai_request_count=0, ai_request_reset_date=now)
            hours_since_reset = 0.0
            logger.info(f"AI request window reset for {user_id}")

        if counter.ai_request_count >= self.limit:
            hours_until_reset = math.ceil(self.window_hours - hours_since_reset)
            logger.info(f"AI request limit reached for {user_id} ({counter.ai_request_count}/{self.limit})")
            raise AILimitExceededError(self.limit, hours_until_reset)

        return AIUsageCounter(
            ai_request_count=counter.ai_request_count + 1,
            ai_request_reset_date=counter.ai_request_reset_date,
        )
