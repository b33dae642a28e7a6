"""Pydantic models for reusable message templates"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict
from pydantic import Field, field_validator

from .base import CamelModel, reject_null


class TemplateType(str, Enum):
    COVER_LETTER = "cover-letter"
    EMAIL = "email"
    FOLLOW_UP = "follow-up"
    THANK_YOU = "thank-you"
    NETWORKING = "networking"
    REFERRAL_REQUEST = "referral-request"
    RESIGNATION = "resignation"
    ACCEPTANCE = "acceptance"
    DECLINE = "decline"
    OTHER = "other"


class Template(CamelModel):
    """Stored template; `variables` lists the {{placeholders}} found in its content"""
    id: str
    name: str
    type: TemplateType = TemplateType.EMAIL
    subject: Optional[str] = None
    content: str
    description: Optional[str] = None
    variables: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    usage_count: int = 0
    created_by: str
    created_at: datetime
    updated_at: datetime


class TemplateCreate(CamelModel):
    """Create template request"""
    name: str = Field(..., min_length=1, max_length=100)
    type: TemplateType = TemplateType.EMAIL
    subject: Optional[str] = Field(None, max_length=200)
    content: str = Field(..., min_length=1, max_length=5000)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Template name cannot be blank")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Post-interview thank you",
                "type": "thank-you",
                "subject": "Thank you, {{hiringManager}}",
                "content": "Dear {{hiringManager}},\n\nThank you for discussing the {{position}} role at {{companyName}}.",
            }
        }


class TemplateUpdate(TemplateCreate):
    """Update template request; name and content are always required"""
    type: Optional[TemplateType] = None

    @field_validator("type")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class TemplatePreviewRequest(CamelModel):
    variables: Dict[str, str] = Field(default_factory=dict)


# ============== Responses ==============

class TemplateResponse(CamelModel):
    msg: Optional[str] = None
    template: Template


class TemplateListResponse(CamelModel):
    templates: List[Template]
    count: int


class TemplatePreview(Template):
    preview_content: str
    preview_subject: Optional[str] = None


class TemplatePreviewResponse(CamelModel):
    template: TemplatePreview
    variables: Dict[str, str]


class TemplateUsageResponse(CamelModel):
    msg: str
    usage_count: int
