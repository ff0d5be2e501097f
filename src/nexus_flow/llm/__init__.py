"""LLM package initialization."""

from nexus_flow.llm.errors import (
    EmptyResponseError,
    ProviderAuthError,
    ProviderError,
    ProviderGenericError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    UnknownProviderError,
)
from nexus_flow.llm.factory import LLMFactory
from nexus_flow.llm.gemini_provider import GeminiProvider
from nexus_flow.llm.openai_provider import OpenAIProvider
from nexus_flow.llm.provider import LLMProvider, ModelId
from nexus_flow.llm.registry import ProviderRegistry
from nexus_flow.llm.simulated_provider import SimulatedProvider

__all__ = [
    "EmptyResponseError",
    "GeminiProvider",
    "LLMFactory",
    "LLMProvider",
    "ModelId",
    "OpenAIProvider",
    "ProviderAuthError",
    "ProviderError",
    "ProviderGenericError",
    "ProviderRateLimitError",
    "ProviderRegistry",
    "ProviderTimeoutError",
    "SimulatedProvider",
    "UnknownProviderError",
]
