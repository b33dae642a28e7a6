"""Shared response models for API endpoints"""

from pydantic import BaseModel
from typing import Optional


class ErrorResponse(BaseModel):
    """Error response"""
    error: str
    detail: Optional[str] = None
    path: Optional[str] = None


class MessageResponse(BaseModel):
    msg: str
