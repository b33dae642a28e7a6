"""AI assistant API router

Every endpoint here consumes one request from the caller's daily AI quota
before the completion backend is called. Administrators are not limited.
"""

from fastapi import APIRouter, Depends
import logging

from ..dependencies import enforce_ai_limit
from ..models.ai_models import (
    AIResult,
    AnalyzeResumeRequest,
    CoverLetterRequest,
    EmailResponseRequest,
    InterviewPrepRequest,
    TailorResumeRequest,
)
from ..models.responses import ErrorResponse
from ..services.ai_service import AIAssistantService, get_ai_service
from ..services.rate_limiter import AIUsageDecision

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ai", tags=["ai"])

LIMITED_RESPONSES = {
    429: {"model": ErrorResponse, "description": "Daily AI request limit reached"},
    502: {"model": ErrorResponse, "description": "AI backend failed"},
    503: {"model": ErrorResponse, "description": "Could not check the AI request limit"},
}


@router.post(
    "/tailor-resume",
    response_model=AIResult,
    responses=LIMITED_RESPONSES,
    summary="Tailor a resume to a job description",
)
async def tailor_resume(
    request: TailorResumeRequest,
    decision: AIUsageDecision = Depends(enforce_ai_limit),
    service: AIAssistantService = Depends(get_ai_service),
) -> AIResult:
    result = await service.tailor_resume(request.resume_text, request.job_description)
    return AIResult(msg="Resume tailored successfully", result=result, remaining_requests=decision.remaining)


@router.post(
    "/email-response",
    response_model=AIResult,
    responses=LIMITED_RESPONSES,
    summary="Draft a reply to an email",
)
async def generate_email_response(
    request: EmailResponseRequest,
    decision: AIUsageDecision = Depends(enforce_ai_limit),
    service: AIAssistantService = Depends(get_ai_service),
) -> AIResult:
    result = await service.generate_email_response(request.email_content, request.context)
    return AIResult(msg="Email response generated successfully", result=result, remaining_requests=decision.remaining)


@router.post(
    "/interview-prep",
    response_model=AIResult,
    responses=LIMITED_RESPONSES,
    summary="Generate interview questions and answers",
)
async def generate_interview_prep(
    request: InterviewPrepRequest,
    decision: AIUsageDecision = Depends(enforce_ai_limit),
    service: AIAssistantService = Depends(get_ai_service),
) -> AIResult:
    result = await service.generate_interview_prep(request.job_description, request.resume_text)
    return AIResult(msg="Interview preparation generated successfully", result=result, remaining_requests=decision.remaining)


@router.post(
    "/analyze-resume",
    response_model=AIResult,
    responses=LIMITED_RESPONSES,
    summary="Get feedback on a resume",
)
async def analyze_resume(
    request: AnalyzeResumeRequest,
    decision: AIUsageDecision = Depends(enforce_ai_limit),
    service: AIAssistantService = Depends(get_ai_service),
) -> AIResult:
    result = await service.analyze_resume(request.resume_text)
    return AIResult(msg="Resume analyzed successfully", result=result, remaining_requests=decision.remaining)


@router.post(
    "/cover-letter",
    response_model=AIResult,
    responses=LIMITED_RESPONSES,
    summary="Generate a cover letter",
)
async def generate_cover_letter(
    request: CoverLetterRequest,
    decision: AIUsageDecision = Depends(enforce_ai_limit),
    service: AIAssistantService = Depends(get_ai_service),
) -> AIResult:
    result = await service.generate_cover_letter(
        request.resume_text, request.job_description, request.company_name
    )
    return AIResult(msg="Cover letter generated successfully", result=result, remaining_requests=decision.remaining)
