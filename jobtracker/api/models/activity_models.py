"""Pydantic models for activities logged against a job application"""

from datetime import datetime
from enum import Enum
from typing import Optional, List
from pydantic import Field, field_validator

from .base import CamelModel, reject_null
from .job_models import JobApplication, JobPriority, JobStatus


class ActivityType(str, Enum):
    """What happened (or is planned) for an application"""
    APPLICATION_SENT = "application-sent"
    EMAIL_SENT = "email-sent"
    EMAIL_RECEIVED = "email-received"
    PHONE_CALL_MADE = "phone-call-made"
    PHONE_CALL_RECEIVED = "phone-call-received"
    INTERVIEW_SCHEDULED = "interview-scheduled"
    INTERVIEW_COMPLETED = "interview-completed"
    FOLLOW_UP_SENT = "follow-up-sent"
    OFFER_RECEIVED = "offer-received"
    REJECTION_RECEIVED = "rejection-received"
    NOTE_ADDED = "note-added"
    OTHER = "other"


class AttachmentType(str, Enum):
    RESUME = "resume"
    COVER_LETTER = "cover-letter"
    PORTFOLIO = "portfolio"
    OTHER = "other"


class ContactPerson(CamelModel):
    name: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[str] = Field(None, max_length=50)


class Attachment(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    url: Optional[str] = Field(None, max_length=500)
    type: AttachmentType = AttachmentType.OTHER


class JobSummary(CamelModel):
    """The parts of the owning job shown next to an activity"""
    id: str
    position: str
    company: str
    status: JobStatus


class Activity(CamelModel):
    """Stored activity"""
    id: str
    job_id: str
    type: ActivityType
    title: str
    description: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    is_completed: bool = False
    priority: JobPriority = JobPriority.MEDIUM
    reminder_date: Optional[datetime] = None
    contact_person: Optional[ContactPerson] = None
    attachments: List[Attachment] = Field(default_factory=list)
    created_by: str
    created_at: datetime
    updated_at: datetime
    job: Optional[JobSummary] = None


class ActivityCreate(CamelModel):
    """Create activity request"""
    job_id: str = Field(..., min_length=1)
    type: ActivityType
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    is_completed: bool = False
    priority: JobPriority = JobPriority.MEDIUM
    reminder_date: Optional[datetime] = None
    contact_person: Optional[ContactPerson] = None
    attachments: List[Attachment] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "jobId": "job_abc123def456",
                "type": "interview-scheduled",
                "title": "Onsite with the platform team",
                "scheduledDate": "2025-06-20T14:00:00Z",
                "contactPerson": {"name": "Dana", "role": "Hiring Manager"},
            }
        }


class ActivityUpdate(CamelModel):
    """Partial activity update; the owning job cannot change"""
    type: Optional[ActivityType] = None
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    is_completed: Optional[bool] = None
    priority: Optional[JobPriority] = None
    reminder_date: Optional[datetime] = None
    contact_person: Optional[ContactPerson] = None
    attachments: Optional[List[Attachment]] = None

    @field_validator("type", "title", "is_completed", "priority", "attachments")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


# ============== Responses ==============

class ActivityResponse(CamelModel):
    activity: Activity


class ActivityListResponse(CamelModel):
    """Paginated activity list"""
    activities: List[Activity]
    total_activities: int
    num_of_pages: int
    current_page: int


class UpcomingActivitiesResponse(CamelModel):
    upcoming_activities: List[Activity]


class JobTimelineResponse(CamelModel):
    """Every activity of one job, newest first"""
    activities: List[Activity]
    job: JobApplication
