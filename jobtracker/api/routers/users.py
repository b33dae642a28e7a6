"""Users and admin API router"""

from fastapi import APIRouter, Depends
import logging

from ..config import get_settings
from ..dependencies import get_current_user, get_db, require_admin
from ..database import JobDatabase
from ..errors import NotFoundError
from ..models.user_models import AIUsage, CurrentUser, User, UserListResponse, UserRole
from ..models.responses import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["users"])


def _to_user(row: dict) -> User:
    role = UserRole(row["role"])
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        location=row["location"],
        role=role,
        ai_usage=AIUsage(
            ai_request_count=row["ai_request_count"],
            ai_request_limit=None if role == UserRole.ADMIN else get_settings().ai_request_limit,
            ai_request_reset_date=row["ai_request_reset_date"],
        ),
    )


@router.get(
    "/users/me",
    response_model=User,
    responses={401: {"model": ErrorResponse}},
    summary="Get the current user and AI usage",
)
async def get_me(
    user: CurrentUser = Depends(get_current_user),
    db: JobDatabase = Depends(get_db),
) -> User:
    row = db.get_user(user.user_id)
    if not row:
        raise NotFoundError("User not found")
    return _to_user(row)


@router.get(
    "/admin/users",
    response_model=UserListResponse,
    responses={403: {"model": ErrorResponse}},
    summary="List users with their AI usage (admin only)",
)
async def list_users(
    admin: CurrentUser = Depends(require_admin),
    db: JobDatabase = Depends(get_db),
) -> UserListResponse:
    users = [_to_user(row) for row in db.list_users()]
    return UserListResponse(users=users, total=len(users))
