"""Job Service - CRUD for a user's tracked job applications"""

import logging
import math
from typing import Optional

from ..database.job_database import JobDatabase, get_job_database
from ..errors import NotFoundError, PermissionDeniedError
from ..models.user_models import CurrentUser
from ..models.job_models import (
    JobApplication,
    JobCreate,
    JobUpdate,
    JobListResponse,
    JobSort,
    JobType,
    QuickAddJob,
)

logger = logging.getLogger(__name__)

ALL = "all"


class JobService:
    """
    Service for job application records.

    Every record belongs to exactly one user. Standard users may only change
    their own records; administrators may change any.
    """

    def __init__(self, db: Optional[JobDatabase] = None):
        self.db = db or get_job_database()

    def _check_permissions(self, user: CurrentUser, owner_id: str):
        if user.is_admin or user.user_id == owner_id:
            return
        raise PermissionDeniedError("Not authorized to access this job")

    def _get_owned_job(self, user: CurrentUser, job_id: str) -> dict:
        job = self.db.get_job(job_id)
        if not job:
            raise NotFoundError(f"No job with id: {job_id}")
        self._check_permissions(user, job["created_by"])
        return job

    def create_job(self, user: CurrentUser, data: JobCreate) -> JobApplication:
        job_id = self.db.insert_job(user.user_id, data.model_dump())
        logger.info(f"Created job {job_id} for {user.user_id}")
        return JobApplication(**self.db.get_job(job_id))

    def list_jobs(
        self,
        user: CurrentUser,
        status: Optional[str] = None,
        job_type: Optional[str] = None,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[JobSort] = None,
        page: int = 1,
        limit: int = 10,
    ) -> JobListResponse:
        """List the user's jobs; a filter value of "all" means no filter"""

        def _filter(value: Optional[str]) -> Optional[str]:
            return None if not value or value == ALL else value

        jobs, total = self.db.search_jobs(
            user.user_id,
            status=_filter(status),
            job_type=_filter(job_type),
            category=_filter(category),
            priority=_filter(priority),
            search=search or None,
            sort=sort.value if sort else None,
            limit=limit,
            offset=(page - 1) * limit,
        )

        return JobListResponse(
            jobs=[JobApplication(**job) for job in jobs],
            total_jobs=total,
            num_of_pages=math.ceil(total / limit),
        )

    def update_job(self, user: CurrentUser, job_id: str, data: JobUpdate) -> JobApplication:
        self._get_owned_job(user, job_id)
        updated = self.db.update_job(job_id, data.model_dump(exclude_unset=True))
        if updated is None:
            raise NotFoundError(f"No job with id: {job_id}")
        return JobApplication(**updated)

    def delete_job(self, user: CurrentUser, job_id: str):
        self._get_owned_job(user, job_id)
        self.db.delete_job(job_id)
        logger.info(f"Deleted job {job_id}")

    def quick_add(self, user: CurrentUser, payload: QuickAddJob) -> JobApplication:
        """Create a job from a browser-extension scrape"""
        notes = (
            f"Added via browser extension from {payload.source}"
            if payload.source else "Added via browser extension"
        )
        job_data = {
            "company": payload.company,
            "position": payload.position,
            "job_location": payload.job_location or "Remote",
            "status": payload.status,
            "job_type": payload.job_type or JobType.FULL_TIME,
            "job_posting_url": payload.job_url,
            "job_description": payload.description[:1000] if payload.description else None,
            "salary": payload.salary.model_dump() if payload.salary else None,
            "application_date": payload.posted_date,
            "notes": notes,
            "category": "other",
            "priority": "medium",
        }

        job_id = self.db.insert_job(user.user_id, job_data)
        logger.info(f"Quick-added job {job_id} for {user.user_id} ({payload.source or 'unknown source'})")
        return JobApplication(**self.db.get_job(job_id))
