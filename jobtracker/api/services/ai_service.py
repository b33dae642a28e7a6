"""AI Assistant service - resume, email, interview and cover letter generation"""

import logging
from typing import Optional

from jobtracker.llm_backends import BaseLLM, get_backend
from ..config import get_settings
from ..errors import AIServiceError

logger = logging.getLogger(__name__)


class AIAssistantService:
    """Thin prompt layer over a single completion backend"""

    def __init__(self, llm: BaseLLM):
        self.llm = llm

    async def _complete(
        self,
        action: str,
        system_prompt: str,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        """Run one completion; any backend failure becomes AIServiceError"""
        try:
            response = await self.llm.achat(
                prompt,
                system_prompt=system_prompt,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            logger.error(f"AI backend error while trying to {action}: {e}")
            raise AIServiceError(
                f"Failed to {action}. Please check your AI backend configuration."
            ) from e

        logger.info(f"{action}: {response.tokens_used or 'unknown'} tokens via {response.backend.value}")
        return response.content

    async def tailor_resume(self, resume_text: str, job_description: str) -> str:
        prompt = f"""Tailor the resume below to the job description while keeping it readable by applicant tracking systems (ATS).

RESUME:
{resume_text}

JOB DESCRIPTION:
{job_description}

GUIDELINES:
1. Identify the key skills, requirements and keywords of the job
2. Bring forward the experience and skills that match them
3. Work the job's keywords in naturally
4. Keep plain formatting: no tables, columns or graphics
5. Keep the original structure and roughly the same length
6. Prefer quantified achievements relevant to the role
7. Only use facts present in the original resume
8. Open with a short professional summary written for this role

Return only the tailored resume text."""

        return await self._complete(
            "generate tailored resume",
            "You are a resume writer who specializes in ATS optimization and role-specific tailoring.",
            prompt,
            max_tokens=2000,
        )

    async def generate_email_response(self, email_content: str, context: Optional[str] = None) -> str:
        context_block = f"\nADDITIONAL CONTEXT:\n{context}\n" if context else ""
        prompt = f"""Write a reply to the email below on behalf of a job seeker.

EMAIL:
{email_content}
{context_block}
GUIDELINES:
1. Professional and courteous
2. Answer every point raised in the email
3. Formal business tone
4. Concise but complete
5. Include a greeting and a closing

Reply:"""

        return await self._complete(
            "generate email response",
            "You are a career advisor who writes professional emails for job seekers.",
            prompt,
            max_tokens=800,
        )

    async def generate_interview_prep(self, job_description: str, resume_text: Optional[str] = None) -> str:
        resume_block = f"\nCANDIDATE RESUME:\n{resume_text}\n" if resume_text else ""
        prompt = f"""Prepare a candidate for an interview for the job below.

JOB DESCRIPTION:
{job_description}
{resume_block}
Produce:
1. The 10 most likely interview questions, each with a STAR-method answer
2. 5 questions the candidate should ask the interviewer
3. The key skills to emphasize
4. Likely concerns the candidate should be ready to address

Use these sections:
## Common Interview Questions & Answers
## Questions to Ask the Interviewer
## Key Points to Emphasize
## Preparation Tips"""

        return await self._complete(
            "generate interview prep",
            "You are an interview coach experienced with both technical and behavioral interviews.",
            prompt,
            max_tokens=3000,
        )

    async def analyze_resume(self, resume_text: str) -> str:
        prompt = f"""Review the resume below and give specific, actionable feedback.

RESUME:
{resume_text}

Cover:
1. Overall strength (score out of 10)
2. ATS compatibility issues
3. Formatting recommendations
4. Content improvements
5. Missing key elements
6. Strong action verbs to add
7. What to remove or de-emphasize"""

        return await self._complete(
            "analyze resume",
            "You are a professional resume reviewer and career coach.",
            prompt,
            max_tokens=1500,
        )

    async def generate_cover_letter(
        self,
        resume_text: str,
        job_description: str,
        company_name: Optional[str] = None,
    ) -> str:
        company_block = f"\nCOMPANY: {company_name}\n" if company_name else ""
        prompt = f"""Write a cover letter for this application.

RESUME:
{resume_text}

JOB DESCRIPTION:
{job_description}
{company_block}
GUIDELINES:
1. Professional and engaging
2. Draw on the most relevant experience in the resume
3. Show genuine interest in the role and the company
4. Address the key requirements of the job
5. Three to four paragraphs in active voice
6. Include a greeting and a closing

Cover letter:"""

        return await self._complete(
            "generate cover letter",
            "You write persuasive, personalized cover letters that land interviews.",
            prompt,
            temperature=0.8,
            max_tokens=1200,
        )


# Service instance (created once per app lifecycle)
_ai_service: Optional[AIAssistantService] = None


def get_ai_service() -> AIAssistantService:
    """Get or create the AI assistant with the configured backend"""
    global _ai_service
    if _ai_service is None:
        settings = get_settings()
        logger.info(f"Initializing AI assistant with backend: {settings.default_llm}")
        _ai_service = AIAssistantService(get_backend(settings.default_llm))
    return _ai_service
