"""Groq chat completions backend (free tier, Llama models)"""

from typing import Optional

from .base import ChatCompletionsLLM, LLMType
from ..api.config import get_settings


class GroqLLM(ChatCompletionsLLM):
    """Completions through `groq.AsyncGroq`. Keys: https://console.groq.com/keys"""

    api_key_env = "GROQ_API_KEY"
    default_max_tokens = 1024

    def __init__(self, model: Optional[str] = None, api_key: Optional[str] = None):
        settings = get_settings()
        super().__init__(
            model or settings.groq_model,
            api_key or settings.groq_api_key,
            timeout=settings.llm_timeout_seconds,
        )

    @property
    def backend_type(self) -> LLMType:
        return LLMType.GROQ

    def _create_client(self):
        from groq import AsyncGroq
        return AsyncGroq(api_key=self.api_key, timeout=self.timeout)
