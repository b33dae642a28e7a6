"""Job applications API router"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from ..dependencies import get_current_user, get_job_service, get_analytics_service
from ..models.user_models import CurrentUser
from ..models.job_models import (
    JobCreate,
    JobUpdate,
    QuickAddJob,
    JobSort,
    JobListResponse,
    JobResponse,
    JobUpdateResponse,
    QuickAddResponse,
)
from ..models.analytics_models import AnalyticsSnapshot, BasicStats
from ..models.responses import ErrorResponse, MessageResponse
from ..services.job_service import JobService
from ..services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/jobs", tags=["jobs"])


@router.post(
    "",
    response_model=JobResponse,
    status_code=201,
    responses={401: {"model": ErrorResponse}},
    summary="Track a job application",
)
async def create_job(
    data: JobCreate,
    user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
) -> JobResponse:
    return JobResponse(job=service.create_job(user, data))


@router.get(
    "",
    response_model=JobListResponse,
    summary="List job applications",
    description="Paginated list of the caller's applications with filters and sorting",
)
async def get_all_jobs(
    status: Optional[str] = Query(None, description="pending/interview/declined or all"),
    job_type: Optional[str] = Query(None, alias="jobType"),
    category: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = Query(None, description="Case-insensitive match on position"),
    sort: Optional[JobSort] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
) -> JobListResponse:
    return service.list_jobs(
        user,
        status=status,
        job_type=job_type,
        category=category,
        priority=priority,
        search=search,
        sort=sort,
        page=page,
        limit=limit,
    )


@router.get(
    "/stats",
    response_model=BasicStats,
    summary="Get status totals and monthly applications",
)
async def show_stats(
    user: CurrentUser = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
) -> BasicStats:
    return service.get_basic_stats(user.user_id)


@router.get(
    "/advanced-analytics",
    response_model=AnalyticsSnapshot,
    summary="Get advanced analytics",
    description="Status funnel, category performance, weekly velocity and monthly trend",
)
async def get_advanced_analytics(
    user: CurrentUser = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsSnapshot:
    return service.get_advanced_analytics(user.user_id)


@router.post(
    "/quick-add",
    response_model=QuickAddResponse,
    status_code=201,
    summary="Add a job from the browser extension",
)
async def quick_add_job(
    payload: QuickAddJob,
    user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
) -> QuickAddResponse:
    job = service.quick_add(user, payload)
    return QuickAddResponse(msg="Job added successfully from extension", job=job)


@router.patch(
    "/{job_id}",
    response_model=JobUpdateResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update a job application",
)
async def update_job(
    job_id: str,
    data: JobUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
) -> JobUpdateResponse:
    return JobUpdateResponse(updated_job=service.update_job(user, job_id, data))


@router.delete(
    "/{job_id}",
    response_model=MessageResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete a job application",
)
async def delete_job(
    job_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
) -> MessageResponse:
    service.delete_job(user, job_id)
    return MessageResponse(msg="Success! Job removed")
