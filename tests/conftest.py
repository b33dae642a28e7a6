"""Shared fixtures for JobTracker tests"""

import itertools
from datetime import datetime, timezone
from pathlib import Path
import tempfile

import pytest

from jobtracker.api.database.job_database import JobDatabase
from jobtracker.api.models.job_models import JobApplication
from jobtracker.api.models.user_models import CurrentUser, UserRole

# Wednesday of ISO week 25
NOW = datetime(2025, 6, 18, 12, 0, tzinfo=timezone.utc)

_ids = itertools.count(1)


def make_job(created_at: datetime = NOW, **overrides) -> JobApplication:
    """Build a JobApplication with sensible defaults"""
    data = {
        "id": f"job_{next(_ids):012d}",
        "company": "TechCorp",
        "position": "Backend Engineer",
        "status": "pending",
        "job_type": "full-time",
        "category": "software-engineering",
        "priority": "medium",
        "application_date": created_at,
        "created_by": "user_test",
        "created_at": created_at,
        "updated_at": created_at,
    }
    data.update(overrides)
    return JobApplication(**data)


@pytest.fixture
def db():
    """Fresh database in a temporary directory"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield JobDatabase(Path(tmpdir) / "test.db")


@pytest.fixture
def user_id(db):
    return db.create_user("Jane Doe", "jane@example.com")


@pytest.fixture
def admin_id(db):
    return db.create_user("Admin", "admin@example.com", role="admin")


@pytest.fixture
def owner(user_id):
    return CurrentUser(user_id=user_id, role=UserRole.USER)


@pytest.fixture
def stranger(db):
    return CurrentUser(user_id=db.create_user("Eve", "eve@example.com"), role=UserRole.USER)


@pytest.fixture
def admin(admin_id):
    return CurrentUser(user_id=admin_id, role=UserRole.ADMIN)
