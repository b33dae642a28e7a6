"""Pydantic models for job applications"""

from datetime import datetime
from enum import Enum
from typing import Optional, List
from pydantic import Field, field_validator

from .base import CamelModel, reject_null


class JobStatus(str, Enum):
    """Application status"""
    PENDING = "pending"
    INTERVIEW = "interview"
    DECLINED = "declined"


class JobType(str, Enum):
    """Type of employment"""
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    REMOTE = "remote"
    INTERNSHIP = "internship"


class JobCategory(str, Enum):
    """Job category / industry"""
    SOFTWARE_ENGINEERING = "software-engineering"
    DATA_SCIENCE = "data-science"
    PRODUCT_MANAGEMENT = "product-management"
    DESIGN = "design"
    MARKETING = "marketing"
    SALES = "sales"
    OPERATIONS = "operations"
    FINANCE = "finance"
    HR = "hr"
    CONSULTING = "consulting"
    OTHER = "other"


class JobPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ApplicationMethod(str, Enum):
    EMAIL = "email"
    WEBSITE = "website"
    LINKEDIN = "linkedin"
    RECRUITER = "recruiter"
    OTHER = "other"


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"
    AUD = "AUD"


class JobSort(str, Enum):
    """Sort orders for the job list"""
    LATEST = "latest"
    OLDEST = "oldest"
    A_Z = "a-z"
    Z_A = "z-a"


# ============== Value Objects ==============

class Salary(CamelModel):
    """Salary range offered for a job"""
    min: Optional[int] = Field(None, ge=0)
    max: Optional[int] = Field(None, ge=0)
    currency: Currency = Currency.USD

    @field_validator("max")
    @classmethod
    def validate_salary_range(cls, v, info):
        if v is not None and info.data.get("min") is not None:
            if v < info.data["min"]:
                raise ValueError("salary max must be >= salary min")
        return v


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Trim tags, drop empties and duplicates while keeping order"""
    if tags is None:
        return None
    cleaned: List[str] = []
    for tag in tags:
        tag = tag.strip()
        if not tag:
            continue
        if len(tag) > 30:
            raise ValueError(f"Tag '{tag[:30]}...' exceeds 30 characters")
        if tag not in cleaned:
            cleaned.append(tag)
    return cleaned


# ============== Job Models ==============

class JobApplication(CamelModel):
    """A tracked job application owned by a single user"""
    id: str
    company: str
    position: str
    status: JobStatus = JobStatus.PENDING
    job_type: Optional[JobType] = JobType.FULL_TIME
    job_location: str = "my city"
    application_date: datetime
    application_deadline: Optional[datetime] = None
    salary: Optional[Salary] = None
    job_description: Optional[str] = None
    company_website: Optional[str] = None
    job_posting_url: Optional[str] = None
    application_method: ApplicationMethod = ApplicationMethod.WEBSITE
    notes: Optional[str] = None
    category: Optional[JobCategory] = JobCategory.OTHER
    tags: List[str] = Field(default_factory=list)
    priority: Optional[JobPriority] = JobPriority.MEDIUM
    created_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "id": "job_abc123def456",
                "company": "TechCorp",
                "position": "Backend Engineer",
                "status": "interview",
                "jobType": "full-time",
                "jobLocation": "Remote",
                "category": "software-engineering",
                "priority": "high",
                "tags": ["python", "startup"],
                "salary": {"min": 120000, "max": 150000, "currency": "USD"},
                "createdBy": "user_0123456789ab",
            }
        }


class JobCreate(CamelModel):
    """Create job request"""
    company: str = Field(..., min_length=1, max_length=50)
    position: str = Field(..., min_length=1, max_length=100)
    status: JobStatus = JobStatus.PENDING
    job_type: JobType = JobType.FULL_TIME
    job_location: str = Field(default="my city", min_length=1)
    application_date: Optional[datetime] = None
    application_deadline: Optional[datetime] = None
    salary: Optional[Salary] = None
    job_description: Optional[str] = Field(None, max_length=1000)
    company_website: Optional[str] = Field(None, max_length=200)
    job_posting_url: Optional[str] = Field(None, max_length=500)
    application_method: ApplicationMethod = ApplicationMethod.WEBSITE
    notes: Optional[str] = Field(None, max_length=500)
    category: JobCategory = JobCategory.OTHER
    tags: List[str] = Field(default_factory=list)
    priority: JobPriority = JobPriority.MEDIUM

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)


class JobUpdate(CamelModel):
    """Update job request; only fields present in the payload are changed"""
    company: str = Field(..., min_length=1, max_length=50)
    position: str = Field(..., min_length=1, max_length=100)
    status: Optional[JobStatus] = None
    job_type: Optional[JobType] = None
    job_location: Optional[str] = Field(None, min_length=1)
    application_date: Optional[datetime] = None
    application_deadline: Optional[datetime] = None
    salary: Optional[Salary] = None
    job_description: Optional[str] = Field(None, max_length=1000)
    company_website: Optional[str] = Field(None, max_length=200)
    job_posting_url: Optional[str] = Field(None, max_length=500)
    application_method: Optional[ApplicationMethod] = None
    notes: Optional[str] = Field(None, max_length=500)
    category: Optional[JobCategory] = None
    tags: Optional[List[str]] = None
    priority: Optional[JobPriority] = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)

    @field_validator("status", "job_location", "application_date", "application_method")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class QuickAddJob(CamelModel):
    """Job payload scraped by the browser extension"""
    company: str = Field(..., min_length=1, max_length=50)
    position: str = Field(..., min_length=1, max_length=100)
    job_location: Optional[str] = None
    job_type: Optional[JobType] = None
    status: JobStatus = JobStatus.PENDING
    job_url: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    salary: Optional[Salary] = None
    posted_date: Optional[datetime] = None
    source: Optional[str] = Field(None, description="Job board the posting came from")

    class Config:
        json_schema_extra = {
            "example": {
                "company": "TechCorp",
                "position": "Data Engineer",
                "jobLocation": "Berlin",
                "jobUrl": "https://www.linkedin.com/jobs/view/123",
                "source": "linkedin",
            }
        }


# ============== Responses ==============

class JobListResponse(CamelModel):
    """Paginated job list"""
    jobs: List[JobApplication]
    total_jobs: int
    num_of_pages: int


class JobResponse(CamelModel):
    job: JobApplication


class JobUpdateResponse(CamelModel):
    updated_job: JobApplication


class QuickAddResponse(CamelModel):
    msg: str
    job: JobApplication
