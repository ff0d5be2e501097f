"""Registry mapping model identifiers to provider instances."""

from __future__ import annotations

import logging

from nexus_flow.llm.errors import UnknownProviderError
from nexus_flow.llm.provider import LLMProvider, ModelId

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Closed set of providers, populated explicitly at startup."""

    def __init__(self, providers: list[LLMProvider] | None = None) -> None:
        self._providers: dict[str, LLMProvider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: LLMProvider) -> None:
        """Insert or overwrite a provider by its identifier."""
        key = provider.id.value
        if key in self._providers:
            logger.info("Replacing registered provider", extra={"model_id": key})
        self._providers[key] = provider

    def resolve(self, model_id: ModelId | str) -> LLMProvider:
        """Return the provider for ``model_id``.

        Raises:
            UnknownProviderError: If nothing is registered under the identifier.
        """
        key = model_id.value if isinstance(model_id, ModelId) else str(model_id)
        provider = self._providers.get(key)
        if provider is None:
            raise UnknownProviderError(key)
        return provider

    def __contains__(self, model_id: object) -> bool:
        key = model_id.value if isinstance(model_id, ModelId) else model_id
        return key in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def ids(self) -> list[str]:
        return list(self._providers)

    def providers(self) -> list[LLMProvider]:
        return list(self._providers.values())
