"""Activity Service - interviews, calls, emails and reminders logged per job"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..database.job_database import JobDatabase, get_job_database
from ..errors import NotFoundError
from ..models.user_models import CurrentUser
from ..models.job_models import JobApplication
from ..models.activity_models import (
    Activity,
    ActivityCreate,
    ActivityListResponse,
    ActivityUpdate,
    JobTimelineResponse,
)

logger = logging.getLogger(__name__)

ALL = "all"


class ActivityService:
    """
    Service for activities attached to a job application.

    Activities are private to the user who logged them and may only be
    attached to that user's own jobs. Someone else's activity or job is
    reported as not found.
    """

    def __init__(self, db: Optional[JobDatabase] = None):
        self.db = db or get_job_database()

    def _get_owned_job(self, user: CurrentUser, job_id: str) -> dict:
        job = self.db.get_job(job_id)
        if not job or job["created_by"] != user.user_id:
            raise NotFoundError(f"No job with id: {job_id}")
        return job

    def _get_owned_activity(self, user: CurrentUser, activity_id: str) -> dict:
        activity = self.db.get_activity(activity_id)
        if not activity or activity["created_by"] != user.user_id:
            raise NotFoundError(f"No activity with id: {activity_id}")
        return activity

    def create_activity(self, user: CurrentUser, data: ActivityCreate) -> Activity:
        self._get_owned_job(user, data.job_id)
        activity_id = self.db.insert_activity(user.user_id, data.model_dump())
        logger.info(f"Logged {data.type.value} activity {activity_id} on job {data.job_id}")
        return Activity(**self.db.get_activity(activity_id))

    def list_activities(
        self,
        user: CurrentUser,
        job_id: Optional[str] = None,
        activity_type: Optional[str] = None,
        is_completed: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> ActivityListResponse:
        """List the user's activities, newest first; a type of "all" means no filter"""
        activities, total = self.db.search_activities(
            user.user_id,
            job_id=job_id or None,
            activity_type=None if not activity_type or activity_type == ALL else activity_type,
            is_completed=is_completed,
            limit=limit,
            offset=(page - 1) * limit,
        )

        return ActivityListResponse(
            activities=[Activity(**a) for a in activities],
            total_activities=total,
            num_of_pages=math.ceil(total / limit),
            current_page=page,
        )

    def get_activity(self, user: CurrentUser, activity_id: str) -> Activity:
        return Activity(**self._get_owned_activity(user, activity_id))

    def update_activity(self, user: CurrentUser, activity_id: str, data: ActivityUpdate) -> Activity:
        self._get_owned_activity(user, activity_id)
        updated = self.db.update_activity(activity_id, data.model_dump(exclude_unset=True))
        if updated is None:
            raise NotFoundError(f"No activity with id: {activity_id}")
        return Activity(**updated)

    def delete_activity(self, user: CurrentUser, activity_id: str):
        self._get_owned_activity(user, activity_id)
        self.db.delete_activity(activity_id)
        logger.info(f"Deleted activity {activity_id}")

    def set_completed(
        self,
        user: CurrentUser,
        activity_id: str,
        completed: bool,
        now: Optional[datetime] = None,
    ) -> Activity:
        """Mark an activity done (stamping the completion time) or reopen it"""
        self._get_owned_activity(user, activity_id)
        changes = {
            "is_completed": completed,
            "completed_date": (now or datetime.now(timezone.utc)) if completed else None,
        }
        updated = self.db.update_activity(activity_id, changes)
        if updated is None:
            raise NotFoundError(f"No activity with id: {activity_id}")
        return Activity(**updated)

    def get_job_timeline(self, user: CurrentUser, job_id: str) -> JobTimelineResponse:
        job = self._get_owned_job(user, job_id)
        activities = self.db.get_activities_for_job(job_id)
        return JobTimelineResponse(
            activities=[Activity(**a) for a in activities],
            job=JobApplication(**job),
        )

    def get_upcoming(self, user: CurrentUser, days: int = 7, now: Optional[datetime] = None) -> list[Activity]:
        """Open activities scheduled or due for a reminder within the next `days` days"""
        now = now or datetime.now(timezone.utc)
        activities = self.db.get_upcoming_activities(user.user_id, now, now + timedelta(days=days))
        return [Activity(**a) for a in activities]
