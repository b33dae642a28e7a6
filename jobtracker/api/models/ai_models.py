"""Request/response models for the AI assistant endpoints"""

from typing import Optional
from pydantic import Field

from .base import CamelModel


class TailorResumeRequest(CamelModel):
    """Request to tailor a resume to a job description"""
    resume_text: str = Field(..., min_length=1, max_length=20000)
    job_description: str = Field(..., min_length=1, max_length=15000)


class EmailResponseRequest(CamelModel):
    """Request to draft a reply to a recruiter email"""
    email_content: str = Field(..., min_length=1, max_length=10000)
    context: Optional[str] = Field(None, max_length=5000)


class InterviewPrepRequest(CamelModel):
    job_description: str = Field(..., min_length=1, max_length=15000)
    resume_text: Optional[str] = Field(None, max_length=20000)


class AnalyzeResumeRequest(CamelModel):
    resume_text: str = Field(..., min_length=1, max_length=20000)


class CoverLetterRequest(CamelModel):
    """Request to generate a cover letter"""
    resume_text: str = Field(..., min_length=1, max_length=20000)
    job_description: str = Field(..., min_length=1, max_length=15000)
    company_name: Optional[str] = Field(None, max_length=100)

    class Config:
        json_schema_extra = {
            "example": {
                "resumeText": "Jane Doe - Backend engineer with 6 years of Python...",
                "jobDescription": "We are hiring a Senior Backend Engineer...",
                "companyName": "TechCorp",
            }
        }


class AIResult(CamelModel):
    """Generated text plus the caller's remaining AI requests"""
    msg: str
    result: str
    remaining_requests: Optional[int] = None  # None when unlimited
