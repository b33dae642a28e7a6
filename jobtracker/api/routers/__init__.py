"""API Routers"""

from .jobs import router as jobs_router
from .activities import router as activities_router
from .templates import router as templates_router
from .ai import router as ai_router
from .users import router as users_router

__all__ = [
    "jobs_router",
    "activities_router",
    "templates_router",
    "ai_router",
    "users_router",
]
