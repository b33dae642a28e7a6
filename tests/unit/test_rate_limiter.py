"""Unit Tests for the AI request limiter"""

import sqlite3
import threading
from datetime import timedelta
from unittest.mock import Mock

import pytest

from jobtracker.api.errors import AILimitExceededError, StorageFailureError
from jobtracker.api.models.user_models import AIUsageCounter, CurrentUser, UserRole
from jobtracker.api.services.rate_limiter import AIRequestLimiter
from tests.conftest import NOW


class InMemoryUsageStore:
    """Dict-backed counter store that records every write"""

    def __init__(self):
        self.counters = {}
        self.saves = []
        self._lock = threading.Lock()

    def update_ai_usage(self, user_id, update):
        with self._lock:
            current = self.counters.get(user_id)
            if current is None:
                raise LookupError(user_id)
            updated = update(current)
            if updated != current:
                self.counters[user_id] = updated
                self.saves.append((user_id, updated))
            return updated


USER = CurrentUser(user_id="user_1", role=UserRole.USER)
ADMIN = CurrentUser(user_id="admin_1", role=UserRole.ADMIN)


@pytest.fixture
def store():
    return InMemoryUsageStore()


@pytest.fixture
def limiter(store):
    return AIRequestLimiter(store, limit=2, window_hours=24)


def set_counter(store, user_id, count, hours_ago):
    store.counters[user_id] = AIUsageCounter(
        ai_request_count=count,
        ai_request_reset_date=NOW - timedelta(hours=hours_ago),
    )


class TestWithinLimit:
    """Test requests that are allowed"""

    def test_last_request_in_window(self, store, limiter):
        set_counter(store, USER.user_id, count=1, hours_ago=1)

        decision = limiter.check(USER, now=NOW)

        assert decision.allowed
        assert decision.remaining == 0
        assert store.counters[USER.user_id].ai_request_count == 2

    def test_first_request(self, store, limiter):
        set_counter(store, USER.user_id, count=0, hours_ago=0)

        decision = limiter.check(USER, now=NOW)

        assert decision.remaining == 1
        assert store.counters[USER.user_id].ai_request_count == 1

    def test_increment_keeps_window_start(self, store, limiter):
        set_counter(store, USER.user_id, count=0, hours_ago=5)

        limiter.check(USER, now=NOW)

        assert store.counters[USER.user_id].ai_request_reset_date == NOW - timedelta(hours=5)


class TestAtLimit:
    """Test rejected requests"""

    def test_rejects_with_hours_until_reset(self, store, limiter):
        set_counter(store, USER.user_id, count=2, hours_ago=1)

        with pytest.raises(AILimitExceededError) as exc_info:
            limiter.check(USER, now=NOW)

        assert exc_info.value.hours_until_reset == 23
        assert exc_info.value.limit == 2
        assert "23 hours" in str(exc_info.value)
        assert exc_info.value.status_code == 429

    def test_rejection_does_not_mutate_counter(self, store, limiter):
        set_counter(store, USER.user_id, count=2, hours_ago=1)

        with pytest.raises(AILimitExceededError):
            limiter.check(USER, now=NOW)

        assert store.saves == []
        assert store.counters[USER.user_id].ai_request_count == 2

    def test_partial_hours_round_up(self, store, limiter):
        set_counter(store, USER.user_id, count=2, hours_ago=1.5)

        with pytest.raises(AILimitExceededError) as exc_info:
            limiter.check(USER, now=NOW)

        assert exc_info.value.hours_until_reset == 23

    def test_third_request_rejected(self, store, limiter):
        set_counter(store, USER.user_id, count=0, hours_ago=0)

        limiter.check(USER, now=NOW)
        limiter.check(USER, now=NOW + timedelta(minutes=1))

        with pytest.raises(AILimitExceededError):
            limiter.check(USER, now=NOW + timedelta(minutes=2))


class TestWindowReset:
    """Test the reset-before-check rule"""

    def test_stale_counter_resets_before_check(self, store, limiter):
        set_counter(store, USER.user_id, count=2, hours_ago=25)

        decision = limiter.check(USER, now=NOW)

        counter = store.counters[USER.user_id]
        assert decision.remaining == 1
        assert counter.ai_request_count == 1
        assert counter.ai_request_reset_date == NOW

    def test_resets_at_exactly_window_length(self, store, limiter):
        set_counter(store, USER.user_id, count=2, hours_ago=24)

        decision = limiter.check(USER, now=NOW)

        assert decision.remaining == 1

    def test_custom_window(self, store):
        limiter = AIRequestLimiter(store, limit=5, window_hours=1)
        set_counter(store, USER.user_id, count=5, hours_ago=2)

        decision = limiter.check(USER, now=NOW)

        assert decision.remaining == 4


class TestAdminBypass:
    """Test that administrators are never limited"""

    def test_admin_always_allowed(self, store, limiter):
        set_counter(store, ADMIN.user_id, count=999, hours_ago=1)

        decision = limiter.check(ADMIN, now=NOW)

        assert decision.allowed
        assert decision.remaining is None

    def test_admin_counter_never_touched(self):
        mock_store = Mock()
        limiter = AIRequestLimiter(mock_store)

        for _ in range(5):
            limiter.check(ADMIN, now=NOW)

        mock_store.update_ai_usage.assert_not_called()


class TestStorageFailures:
    """Test that counter errors are neither allow nor deny"""

    def test_read_failure_is_wrapped(self):
        mock_store = Mock()
        error = sqlite3.OperationalError("database is locked")
        mock_store.update_ai_usage.side_effect = error
        limiter = AIRequestLimiter(mock_store)

        with pytest.raises(StorageFailureError) as exc_info:
            limiter.check(USER, now=NOW)

        assert exc_info.value.message == "Failed to check AI request limit"
        assert exc_info.value.original_error is error
        assert exc_info.value.status_code == 503

    def test_write_failure_is_wrapped(self):
        def write_fails(user_id, update):
            update(AIUsageCounter(0, NOW))
            raise sqlite3.OperationalError("disk full")

        mock_store = Mock()
        mock_store.update_ai_usage.side_effect = write_fails
        limiter = AIRequestLimiter(mock_store)

        with pytest.raises(StorageFailureError):
            limiter.check(USER, now=NOW)

    def test_missing_counter_is_storage_failure(self, limiter):
        with pytest.raises(StorageFailureError):
            limiter.check(USER, now=NOW)


class TestWithDatabase:
    """Test the limiter against the sqlite counter store"""

    def test_counter_persists_between_requests(self, db):
        user_id = db.create_user("Jane", "jane@example.com", now=NOW)
        user = CurrentUser(user_id=user_id, role=UserRole.USER)
        limiter = AIRequestLimiter(db, limit=2, window_hours=24)

        assert limiter.check(user, now=NOW).remaining == 1
        assert limiter.check(user, now=NOW + timedelta(hours=1)).remaining == 0

        with pytest.raises(AILimitExceededError) as exc_info:
            limiter.check(user, now=NOW + timedelta(hours=2))
        assert exc_info.value.hours_until_reset == 22

        assert limiter.check(user, now=NOW + timedelta(hours=24)).remaining == 1
        assert db.get_ai_usage(user_id).ai_request_count == 1


class TestConcurrency:
    """Test that simultaneous requests share one quota"""

    def test_concurrent_requests_never_exceed_limit(self, db):
        """Five simultaneous requests against a limit of 2 admit exactly two"""
        user_id = db.create_user("Jane", "jane@example.com", now=NOW)
        user = CurrentUser(user_id=user_id, role=UserRole.USER)
        limiter = AIRequestLimiter(db, limit=2, window_hours=24)
        barrier = threading.Barrier(5)
        allowed, rejected, failed = [], [], []

        def request():
            barrier.wait()
            try:
                allowed.append(limiter.check(user, now=NOW + timedelta(minutes=1)))
            except AILimitExceededError:
                rejected.append(True)
            except Exception as e:
                failed.append(e)

        threads = [threading.Thread(target=request) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert failed == []
        assert len(allowed) == 2
        assert len(rejected) == 3
        assert sorted(d.remaining for d in allowed) == [0, 1]
        assert db.get_ai_usage(user_id).ai_request_count == 2

    def test_concurrent_requests_in_memory(self, store):
        set_counter(store, USER.user_id, count=0, hours_ago=0)
        limiter = AIRequestLimiter(store, limit=2, window_hours=24)
        results = []

        def request():
            try:
                results.append(limiter.check(USER, now=NOW).remaining)
            except AILimitExceededError:
                results.append("denied")

        threads = [threading.Thread(target=request) for _ in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count("denied") == 4
        assert store.counters[USER.user_id].ai_request_count == 2
