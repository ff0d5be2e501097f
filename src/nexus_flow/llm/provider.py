"""Abstract base class for LLM providers."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import TypeVar

from nexus_flow.core.models import ModelId
from nexus_flow.llm.errors import EmptyResponseError, ProviderTimeoutError

T = TypeVar("T")

__all__ = ["LLMProvider", "ModelId", "build_user_message"]


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    This interface allows pluggable LLM backends (Gemini, OpenAI, simulated
    runners, etc.). Implementations must raise a
    :class:`~nexus_flow.llm.errors.ProviderError` instead of returning an
    empty or partial string.

    Attributes:
        id: Model identifier the provider is registered under.
        name: Display name.
        description: One-line description for model pickers.
        is_local: Informational flag separating local/offline runners from
            remote APIs. It never changes behaviour.
    """

    id: ModelId
    name: str
    description: str
    is_local: bool = False

    @abstractmethod
    async def generate(self, prompt: str, system_instruction: str = "", context: str = "") -> str:
        """Generate text for a prompt.

        Args:
            prompt: The task prompt, including any operator feedback.
            system_instruction: System-level instruction for the model.
            context: Results of previously approved steps.

        Returns:
            Generated text, never empty.
        """
        pass

    async def _with_timeout(self, awaitable: Awaitable[T], timeout_seconds: float) -> T:
        """Await ``awaitable``, converting an expired deadline into a provider error.

        Cancellation is cooperative: the request may still complete upstream.
        """
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
        except TimeoutError as e:
            raise ProviderTimeoutError(
                f"{self.name} request timed out after {timeout_seconds:g} seconds. "
                "Please try again.",
                timeout_seconds=timeout_seconds,
                provider_id=self.id.value,
            ) from e

    def _require_text(self, text: str | None) -> str:
        if not text or not text.strip():
            raise EmptyResponseError(
                f"Empty or invalid response from {self.name}",
                provider_id=self.id.value,
            )
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id.value!r})"


def build_user_message(prompt: str, context: str) -> str:
    """Render the single user turn sent to remote chat models."""

    return f"Context:\n{context}\n\nTask:\n{prompt}"
