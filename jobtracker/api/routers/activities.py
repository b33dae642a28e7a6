"""Activities API router - the timeline of events behind each application"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from ..dependencies import get_current_user, get_activity_service
from ..models.user_models import CurrentUser
from ..models.activity_models import (
    ActivityCreate,
    ActivityUpdate,
    ActivityResponse,
    ActivityListResponse,
    UpcomingActivitiesResponse,
    JobTimelineResponse,
)
from ..models.responses import ErrorResponse, MessageResponse
from ..services.activity_service import ActivityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/activities", tags=["activities"])

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=ActivityResponse,
    status_code=201,
    responses=NOT_FOUND,
    summary="Log an activity against one of your jobs",
)
async def create_activity(
    data: ActivityCreate,
    user: CurrentUser = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityResponse:
    return ActivityResponse(activity=service.create_activity(user, data))


@router.get("", response_model=ActivityListResponse, summary="List activities")
async def get_all_activities(
    job_id: Optional[str] = Query(None, alias="jobId"),
    activity_type: Optional[str] = Query(None, alias="type", description="Activity type or all"),
    is_completed: Optional[bool] = Query(None, alias="isCompleted"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityListResponse:
    return service.list_activities(
        user,
        job_id=job_id,
        activity_type=activity_type,
        is_completed=is_completed,
        page=page,
        limit=limit,
    )


@router.get(
    "/upcoming",
    response_model=UpcomingActivitiesResponse,
    summary="Open activities scheduled or due for a reminder soon",
)
async def get_upcoming_activities(
    days: int = Query(7, ge=1, le=365),
    user: CurrentUser = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
) -> UpcomingActivitiesResponse:
    return UpcomingActivitiesResponse(upcoming_activities=service.get_upcoming(user, days=days))


@router.get(
    "/job/{job_id}/timeline",
    response_model=JobTimelineResponse,
    responses=NOT_FOUND,
    summary="All activities of one job, newest first",
)
async def get_job_timeline(
    job_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
) -> JobTimelineResponse:
    return service.get_job_timeline(user, job_id)


@router.get("/{activity_id}", response_model=ActivityResponse, responses=NOT_FOUND)
async def get_activity(
    activity_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityResponse:
    return ActivityResponse(activity=service.get_activity(user, activity_id))


@router.patch("/{activity_id}", response_model=ActivityResponse, responses=NOT_FOUND)
async def update_activity(
    activity_id: str,
    data: ActivityUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityResponse:
    return ActivityResponse(activity=service.update_activity(user, activity_id, data))


@router.delete("/{activity_id}", response_model=MessageResponse, responses=NOT_FOUND)
async def delete_activity(
    activity_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
) -> MessageResponse:
    service.delete_activity(user, activity_id)
    return MessageResponse(msg="Activity deleted successfully")


@router.patch("/{activity_id}/complete", response_model=ActivityResponse, responses=NOT_FOUND)
async def mark_activity_complete(
    activity_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityResponse:
    return ActivityResponse(activity=service.set_completed(user, activity_id, completed=True))


@router.patch("/{activity_id}/incomplete", response_model=ActivityResponse, responses=NOT_FOUND)
async def mark_activity_incomplete(
    activity_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
) -> ActivityResponse:
    return ActivityResponse(activity=service.set_completed(user, activity_id, completed=False))
