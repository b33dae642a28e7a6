"""OpenAI chat completions backend (paid, the default)"""

from typing import Optional

from .base import ChatCompletionsLLM, LLMType
from ..api.config import get_settings


class OpenAILLM(ChatCompletionsLLM):
    """Completions through `openai.AsyncOpenAI`. Keys: https://platform.openai.com/api-keys"""

    api_key_env = "OPENAI_API_KEY"

    def __init__(self, model: Optional[str] = None, api_key: Optional[str] = None):
        settings = get_settings()
        super().__init__(
            model or settings.openai_model,
            api_key or settings.openai_api_key,
            timeout=settings.llm_timeout_seconds,
        )

    @property
    def backend_type(self) -> LLMType:
        return LLMType.OPENAI

    def _create_client(self):
        from openai import AsyncOpenAI
        return AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
