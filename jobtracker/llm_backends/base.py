"""Base LLM interface for all backends"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, List, Dict, Any
from enum import Enum


class LLMType(str, Enum):
    """Supported LLM types"""
    OPENAI = "openai"
    GROQ = "groq"


@dataclass
class LLMResponse:
    """Standardized response from any LLM backend"""
    content: str
    model: str
    backend: LLMType
    tokens_used: Optional[int] = None
    finish_reason: Optional[str] = None
    raw_response: Optional[Dict[str, Any]] = None


@dataclass
class Message:
    """Chat message format"""
    role: str  # "system", "user", "assistant"
    content: str


class BaseLLM(ABC):
    """Abstract base class for all LLM backends"""

    def __init__(self, model: str):
        self.model = model
        self._is_available: Optional[bool] = None

    @property
    @abstractmethod
    def backend_type(self) -> LLMType:
        """Return the backend type"""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if this backend is available (API key set, etc.)"""
        pass

    @abstractmethod
    async def generate(
        self,
        messages: List[Message],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a response from the LLM"""
        pass

    async def achat(
        self,
        user_message: str,
        system_prompt: Optional[str] = None,
        history: Optional[List[Message]] = None,
        **kwargs
    ) -> LLMResponse:
        """Async chat helper"""
        messages = []

        if system_prompt:
            messages.append(Message(role="system", content=system_prompt))

        if history:
            messages.extend(history)

        messages.append(Message(role="user", content=user_message))

        return await self.generate(messages, **kwargs)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model}, available={self.is_available})"


class ChatCompletionsLLM(BaseLLM):
    """
    Backend for providers that expose the OpenAI-style async chat completions API.

    Subclasses build the provider's async client; requests are awaited on it
    directly so a slow completion never blocks the event loop.
    """

    api_key_env: str = ""
    default_max_tokens: int = 2000

    def __init__(self, model: str, api_key: Optional[str], timeout: float = 60.0):
        super().__init__(model)
        self.api_key = api_key
        self.timeout = timeout
        self._client = None

    @property
    def is_available(self) -> bool:
        if self._is_available is None:
            self._is_available = bool(self.api_key)
        return self._is_available

    @abstractmethod
    def _create_client(self):
        """Build the provider's async client"""

    def _get_client(self):
        if self._client is None:
            self._client = self._create_client()
        return self._client

    async def generate(
        self,
        messages: List[Message],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        if not self.is_available:
            raise ValueError(f"{self.backend_type.value} API key not configured. Set {self.api_key_env} in .env")

        completion = await self._get_client().chat.completions.create(
            model=self.model,
            messages=[{"role": m.role, "content": m.content} for m in messages],
            temperature=temperature,
            max_tokens=max_tokens or self.default_max_tokens,
            **kwargs
        )

        choice = completion.choices[0]
        return LLMResponse(
            content=choice.message.content or "",
            model=completion.model or self.model,
            backend=self.backend_type,
            tokens_used=completion.usage.total_tokens if completion.usage else None,
            finish_reason=choice.finish_reason,
            raw_response=completion.model_dump(),
        )
