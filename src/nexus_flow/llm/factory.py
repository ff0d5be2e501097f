"""Factory for creating LLM providers."""

import logging

from nexus_flow.core.config import LLMConfig
from nexus_flow.llm.gemini_provider import GeminiProvider
from nexus_flow.llm.openai_provider import OpenAIProvider
from nexus_flow.llm.provider import LLMProvider, ModelId
from nexus_flow.llm.registry import ProviderRegistry
from nexus_flow.llm.simulated_provider import SimulatedProvider

logger = logging.getLogger(__name__)


class LLMFactory:
    """Factory for creating LLM provider instances."""

    @staticmethod
    def create(model_id: ModelId, config: LLMConfig) -> LLMProvider:
        """Create a single provider for a model identifier.

        Args:
            model_id: Which model to build a provider for.
            config: LLM configuration.

        Returns:
            Configured LLM provider instance.

        Raises:
            ValueError: If the model identifier is not supported.
        """
        logger.debug(f"Creating LLM provider: {model_id!r}")

        if model_id == ModelId.GEMINI_3:
            return GeminiProvider(config)
        elif model_id == ModelId.GPT_4O:
            return OpenAIProvider(config)
        elif model_id == ModelId.CLAUDE_3:
            return SimulatedProvider(
                ModelId.CLAUDE_3,
                "Claude 3 Opus",
                "Anthropic",
                is_local=False,
                latency_seconds=config.simulated_cloud_latency_seconds,
            )
        elif model_id == ModelId.LLAMA_3:
            return SimulatedProvider(
                ModelId.LLAMA_3,
                "Llama 3",
                "Ollama/Local",
                is_local=True,
                latency_seconds=config.simulated_local_latency_seconds,
            )
        elif model_id == ModelId.HF_TRANSFORMERS:
            return SimulatedProvider(
                ModelId.HF_TRANSFORMERS,
                "HF Transformers",
                "Hugging Face",
                is_local=True,
                latency_seconds=config.simulated_local_latency_seconds,
            )
        else:
            raise ValueError(f"Unsupported LLM provider: {model_id}")

    @classmethod
    def create_registry(cls, config: LLMConfig) -> ProviderRegistry:
        """Build a registry holding one provider for every known model."""
        registry = ProviderRegistry([cls.create(model_id, config) for model_id in ModelId])
        logger.info("Provider registry ready", extra={"providers": registry.ids()})
        return registry
