"""OpenAI LLM provider implementation."""

import logging

import openai
from openai import AsyncOpenAI

from nexus_flow.core.config import LLMConfig
from nexus_flow.llm.errors import (
    ProviderAuthError,
    ProviderError,
    ProviderGenericError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from nexus_flow.llm.provider import LLMProvider, ModelId, build_user_message

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI API provider implementation."""

    id = ModelId.GPT_4O
    name = "OpenAI GPT-4o"
    description = "General-purpose reasoning via the OpenAI API"
    is_local = False

    def __init__(self, config: LLMConfig, client: AsyncOpenAI | None = None) -> None:
        """Initialize the OpenAI provider.

        Args:
            config: LLM configuration.
            client: Pre-built client, mainly for tests. When omitted the client
                is created on first use from ``config.openai_api_key``.
        """
        self.config = config
        self.model = config.openai_model
        self.temperature = config.openai_temperature
        self.timeout_seconds = config.timeout_seconds
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client
        if not self.config.openai_api_key:
            raise ProviderAuthError(
                "Missing OPENAI_API_KEY environment variable. "
                "Please set it in your .env file.",
                provider_id=self.id.value,
            )
        # SDK retries would stretch a single attempt past our deadline.
        self._client = AsyncOpenAI(api_key=self.config.openai_api_key, max_retries=0)
        logger.info(f"OpenAI provider initialized with model: {self.model}")
        return self._client

    async def generate(self, prompt: str, system_instruction: str = "", context: str = "") -> str:
        """Generate a chat completion using the OpenAI API.

        Args:
            prompt: The task prompt.
            system_instruction: Sent as the system message when non-empty.
            context: Results of previously approved steps.

        Returns:
            Generated text.

        Raises:
            ProviderError: On any failure, classified by cause.
        """
        client = self._get_client()

        messages: list[dict[str, str]] = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": build_user_message(prompt, context)})

        logger.debug(f"Generating chat completion with {len(messages)} messages")

        try:
            response = await self._with_timeout(
                client.chat.completions.create(
                    model=self.model,
                    messages=messages,  # type: ignore
                    temperature=self.temperature,
                ),
                self.timeout_seconds,
            )
        except ProviderError:
            raise
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise ProviderAuthError(
                f"Authentication failed: {e.message}", provider_id=self.id.value
            ) from e
        except openai.RateLimitError as e:
            raise ProviderRateLimitError(
                "API rate limit exceeded. Please wait a moment and try again.",
                provider_id=self.id.value,
            ) from e
        except openai.APITimeoutError as e:
            raise ProviderTimeoutError(
                f"{self.name} request timed out. Please try again.",
                timeout_seconds=self.timeout_seconds,
                provider_id=self.id.value,
            ) from e
        except openai.OpenAIError as e:
            raise ProviderGenericError(f"OpenAI API Error: {e}", provider_id=self.id.value) from e

        content = self._require_text(response.choices[0].message.content if response.choices else None)
        logger.debug(f"Generated {len(content)} characters")
        return content
