"""Unit Tests for the OpenAI and Groq completion backends"""

from unittest.mock import Mock, AsyncMock, patch

import pytest

from jobtracker.llm_backends import GroqLLM, LLMType, OpenAILLM, get_backend


def make_completion(content="Tailored resume", model="gpt-4o-2024", tokens=42):
    completion = Mock()
    completion.choices = [Mock(message=Mock(content=content), finish_reason="stop")]
    completion.model = model
    completion.usage = Mock(total_tokens=tokens)
    completion.model_dump.return_value = {"id": "cmpl_1"}
    return completion


def fake_client(completion):
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=completion)
    return client


class TestAsyncClients:
    """Each backend builds the provider's async client"""

    def test_openai_uses_async_client(self):
        from openai import AsyncOpenAI

        llm = OpenAILLM(model="gpt-4", api_key="sk-test")
        assert isinstance(llm._get_client(), AsyncOpenAI)

    def test_groq_uses_async_client(self):
        from groq import AsyncGroq

        llm = GroqLLM(model="llama-3.3-70b-versatile", api_key="gsk-test")
        assert isinstance(llm._get_client(), AsyncGroq)

    def test_client_is_reused(self):
        llm = OpenAILLM(model="gpt-4", api_key="sk-test")
        assert llm._get_client() is llm._get_client()


class TestGenerate:
    """Test request building and response mapping"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("backend_cls,backend_type", [
        (OpenAILLM, LLMType.OPENAI),
        (GroqLLM, LLMType.GROQ),
    ])
    async def test_completion_is_awaited(self, backend_cls, backend_type):
        llm = backend_cls(model="test-model", api_key="key")
        client = fake_client(make_completion())

        with patch.object(llm, "_create_client", return_value=client):
            response = await llm.achat("Tailor this", system_prompt="You are a coach", max_tokens=500)

        create = client.chat.completions.create
        create.assert_awaited_once()
        kwargs = create.await_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 500
        assert kwargs["messages"] == [
            {"role": "system", "content": "You are a coach"},
            {"role": "user", "content": "Tailor this"},
        ]
        assert response.content == "Tailored resume"
        assert response.backend == backend_type
        assert response.tokens_used == 42
        assert response.finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_default_max_tokens(self):
        llm = GroqLLM(model="test-model", api_key="key")
        client = fake_client(make_completion())

        with patch.object(llm, "_create_client", return_value=client):
            await llm.achat("Hello")

        assert client.chat.completions.create.await_args.kwargs["max_tokens"] == GroqLLM.default_max_tokens

    @pytest.mark.asyncio
    async def test_missing_usage(self):
        llm = OpenAILLM(model="test-model", api_key="key")
        completion = make_completion()
        completion.usage = None

        with patch.object(llm, "_create_client", return_value=fake_client(completion)):
            response = await llm.achat("Hello")

        assert response.tokens_used is None

    @pytest.mark.asyncio
    async def test_missing_key_fails_before_request(self):
        llm = OpenAILLM(model="test-model", api_key="")
        llm.api_key = None

        with patch.object(llm, "_create_client") as create_client:
            with pytest.raises(ValueError, match="OPENAI_API_KEY"):
                await llm.achat("Hello")

        create_client.assert_not_called()
        assert not llm.is_available


class TestRegistry:
    def test_get_backend(self):
        assert isinstance(get_backend("Groq"), GroqLLM)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            get_backend("ollama")
