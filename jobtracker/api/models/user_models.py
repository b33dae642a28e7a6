"""Pydantic models for users and AI usage"""

from datetime import datetime
from enum import Enum
from typing import Optional, List
from dataclasses import dataclass

from .base import CamelModel


class UserRole(str, Enum):
    """Access level; administrators bypass the AI request limit"""
    USER = "user"
    ADMIN = "admin"


@dataclass
class AIUsageCounter:
    """Per-user AI request counter for the current window"""
    ai_request_count: int
    ai_request_reset_date: datetime


@dataclass
class CurrentUser:
    """Identity attached to an authenticated request"""
    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class AIUsage(CamelModel):
    ai_request_count: int
    ai_request_limit: Optional[int] = None  # None for unlimited (admin)
    ai_request_reset_date: datetime


class User(CamelModel):
    """User profile"""
    id: str
    name: str
    email: str
    location: str = "my city"
    role: UserRole = UserRole.USER
    ai_usage: AIUsage


class UserListResponse(CamelModel):
    users: List[User]
    total: int
