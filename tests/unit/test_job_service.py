"""Unit Tests for the Job and AI Assistant services"""

import pytest
from unittest.mock import Mock, AsyncMock

from jobtracker.api.errors import AIServiceError, NotFoundError, PermissionDeniedError
from jobtracker.api.models.job_models import JobCreate, JobUpdate, JobSort, QuickAddJob, JobStatus
from jobtracker.api.services.job_service import JobService
from jobtracker.api.services.ai_service import AIAssistantService
from jobtracker.llm_backends import LLMResponse, LLMType


@pytest.fixture
def service(db):
    return JobService(db)


class TestJobCrud:
    """Test create, update and delete with ownership checks"""

    def test_create_sets_owner(self, service, owner):
        job = service.create_job(owner, JobCreate(company="TechCorp", position="Engineer"))
        assert job.created_by == owner.user_id
        assert job.status == JobStatus.PENDING

    def test_update_own_job(self, service, owner):
        job = service.create_job(owner, JobCreate(company="TechCorp", position="Engineer"))
        updated = service.update_job(
            owner, job.id, JobUpdate(company="TechCorp", position="Senior Engineer", status="interview")
        )
        assert updated.position == "Senior Engineer"
        assert updated.status == JobStatus.INTERVIEW
        assert updated.job_location == job.job_location

    def test_stranger_cannot_update(self, service, owner, stranger):
        job = service.create_job(owner, JobCreate(company="TechCorp", position="Engineer"))
        with pytest.raises(PermissionDeniedError):
            service.update_job(stranger, job.id, JobUpdate(company="X", position="Y"))

    def test_admin_can_delete_any_job(self, service, owner, admin, db):
        job = service.create_job(owner, JobCreate(company="TechCorp", position="Engineer"))
        service.delete_job(admin, job.id)
        assert db.get_job(job.id) is None

    def test_missing_job(self, service, owner):
        with pytest.raises(NotFoundError, match="No job with id"):
            service.delete_job(owner, "job_missing")


class TestListJobs:
    """Test listing with filters and pagination"""

    def test_all_means_no_filter(self, service, owner):
        service.create_job(owner, JobCreate(company="A", position="One", status="interview"))
        service.create_job(owner, JobCreate(company="B", position="Two"))

        result = service.list_jobs(owner, status="all", job_type="all")
        assert result.total_jobs == 2

        result = service.list_jobs(owner, status="interview")
        assert result.total_jobs == 1

    def test_page_count(self, service, owner):
        for i in range(5):
            service.create_job(owner, JobCreate(company="A", position=f"Role {i}"))

        result = service.list_jobs(owner, sort=JobSort.A_Z, page=2, limit=2)

        assert result.total_jobs == 5
        assert result.num_of_pages == 3
        assert [j.position for j in result.jobs] == ["Role 2", "Role 3"]

    def test_empty(self, service, owner):
        result = service.list_jobs(owner)
        assert result.jobs == []
        assert result.num_of_pages == 0


class TestQuickAdd:
    """Test jobs added from the browser extension"""

    def test_defaults_and_notes(self, service, owner):
        job = service.quick_add(owner, QuickAddJob(
            company="TechCorp",
            position="Engineer",
            description="x" * 1500,
            source="linkedin",
        ))

        assert job.job_location == "Remote"
        assert job.job_type.value == "full-time"
        assert job.notes == "Added via browser extension from linkedin"
        assert len(job.job_description) == 1000
        assert job.category.value == "other"

    def test_without_source(self, service, owner):
        job = service.quick_add(owner, QuickAddJob(company="TechCorp", position="Engineer"))
        assert job.notes == "Added via browser extension"


def make_llm(content="Generated text"):
    llm = Mock()
    llm.achat = AsyncMock(return_value=LLMResponse(
        content=content, model="test-model", backend=LLMType.OPENAI, tokens_used=42,
    ))
    return llm


class TestAIAssistantService:
    """Test prompt dispatch and error mapping"""

    @pytest.mark.asyncio
    async def test_tailor_resume(self):
        llm = make_llm("Tailored")
        service = AIAssistantService(llm)

        result = await service.tailor_resume("My resume", "Python developer wanted")

        assert result == "Tailored"
        prompt = llm.achat.call_args.args[0]
        assert "My resume" in prompt
        assert "Python developer wanted" in prompt
        assert llm.achat.call_args.kwargs["system_prompt"]

    @pytest.mark.asyncio
    async def test_cover_letter_mentions_company(self):
        llm = make_llm()
        service = AIAssistantService(llm)

        await service.generate_cover_letter("Resume", "Job", company_name="TechCorp")

        assert "TechCorp" in llm.achat.call_args.args[0]
        assert llm.achat.call_args.kwargs["temperature"] == 0.8

    @pytest.mark.asyncio
    async def test_backend_failure_becomes_ai_service_error(self):
        llm = Mock()
        llm.achat = AsyncMock(side_effect=RuntimeError("invalid api key"))
        service = AIAssistantService(llm)

        with pytest.raises(AIServiceError) as exc_info:
            await service.analyze_resume("Resume")

        assert exc_info.value.status_code == 502
        assert "analyze" in exc_info.value.message
