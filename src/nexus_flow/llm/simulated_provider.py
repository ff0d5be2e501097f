"""Simulated providers for backends that are not integrated yet."""

import asyncio
import logging

from nexus_flow.llm.provider import LLMProvider, ModelId

logger = logging.getLogger(__name__)


class SimulatedProvider(LLMProvider):
    """Stand-in for Claude, Ollama and Hugging Face runners.

    Responds after a fixed artificial delay so callers see the same timing
    shape as a real network call. The response text is deterministic.
    """

    def __init__(
        self,
        model_id: ModelId,
        name: str,
        description: str,
        is_local: bool,
        latency_seconds: float,
    ) -> None:
        self.id = model_id
        self.name = name
        self.description = description
        self.is_local = is_local
        self.latency_seconds = latency_seconds

    async def generate(self, prompt: str, system_instruction: str = "", context: str = "") -> str:
        await asyncio.sleep(self.latency_seconds)

        prefix = "[LOCAL SIMULATED]" if self.is_local else "[CLOUD API SIMULATED]"
        excerpt = prompt[:50] + ("..." if len(prompt) > 50 else "")
        logger.debug("Simulated response", extra={"provider": self.id.value})
        return (
            f"{prefix} Response from {self.name}\n\n"
            f'Prompt: "{excerpt}"\n\n'
            f"Context length: {len(context)} characters\n\n"
            "This is a placeholder response demonstrating that the request was routed "
            f"to the {self.id.value} provider. A production deployment would connect to "
            "the actual model endpoint and return real inference results."
        )
