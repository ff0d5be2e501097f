"""Exceptions raised by LLM providers and the provider registry.

Every provider failure surfaces as a :class:`ProviderError` subclass whose
message is safe to show to the operator as-is.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for failures raised while generating text."""

    def __init__(self, message: str, *, provider_id: str | None = None) -> None:
        super().__init__(message)
        self.provider_id = provider_id

    @property
    def message(self) -> str:
        return str(self)


class UnknownProviderError(ProviderError):
    """No provider is registered for the requested model identifier."""

    def __init__(self, model_id: str) -> None:
        super().__init__(f"Model provider {model_id} not found.", provider_id=model_id)
        self.model_id = model_id


class ProviderTimeoutError(ProviderError):
    """The upstream call did not complete within the configured timeout."""

    def __init__(self, message: str, *, timeout_seconds: float, provider_id: str | None = None) -> None:
        super().__init__(message, provider_id=provider_id)
        self.timeout_seconds = timeout_seconds


class ProviderAuthError(ProviderError):
    """Credentials are missing or were rejected upstream."""


class ProviderRateLimitError(ProviderError):
    """The upstream rejected the call due to rate limiting or quota."""


class ProviderGenericError(ProviderError):
    """Any other upstream failure."""


class EmptyResponseError(ProviderError):
    """The upstream returned no usable text."""
