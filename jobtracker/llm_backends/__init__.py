"""LLM Backend implementations for the AI assistant"""

from .base import BaseLLM, ChatCompletionsLLM, LLMResponse, Message, LLMType
from .openai_backend import OpenAILLM
from .groq_backend import GroqLLM

# Backend registry
BACKENDS = {
    "openai": OpenAILLM,
    "groq": GroqLLM,
}


def get_backend(name: str) -> BaseLLM:
    """Get an LLM backend by name.

    Args:
        name: Backend name (openai, groq)

    Returns:
        Initialized LLM backend instance

    Raises:
        ValueError: If backend name is not recognized
    """
    name = name.lower()
    if name not in BACKENDS:
        raise ValueError(f"Unknown backend: {name}. Available: {list(BACKENDS.keys())}")
    return BACKENDS[name]()


__all__ = [
    "BaseLLM",
    "ChatCompletionsLLM",
    "LLMResponse",
    "Message",
    "LLMType",
    "OpenAILLM",
    "GroqLLM",
    "BACKENDS",
    "get_backend",
]
