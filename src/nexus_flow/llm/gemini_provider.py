"""Google Gemini provider implementation."""

import logging
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from nexus_flow.core.config import LLMConfig
from nexus_flow.llm.errors import (
    ProviderAuthError,
    ProviderError,
    ProviderGenericError,
    ProviderRateLimitError,
)
from nexus_flow.llm.provider import LLMProvider, ModelId, build_user_message

logger = logging.getLogger(__name__)

_AUTH_CODES = {401, 403}
_AUTH_STATUSES = {"UNAUTHENTICATED", "PERMISSION_DENIED"}


def classify_gemini_error(error: Exception) -> ProviderError:
    """Map a google-genai exception to the provider error taxonomy."""

    provider_id = ModelId.GEMINI_3.value
    code = getattr(error, "code", None)
    status = str(getattr(error, "status", "") or "").upper()
    text = str(getattr(error, "message", None) or error)
    lowered = text.lower()

    if code in _AUTH_CODES or status in _AUTH_STATUSES or "api key" in lowered:
        return ProviderAuthError(f"Authentication failed: {text}", provider_id=provider_id)
    if code == 429 or status == "RESOURCE_EXHAUSTED" or "quota" in lowered or "rate limit" in lowered:
        return ProviderRateLimitError(
            "API rate limit exceeded. Please wait a moment and try again.",
            provider_id=provider_id,
        )
    return ProviderGenericError(f"Gemini API Error: {text}", provider_id=provider_id)


class GeminiProvider(LLMProvider):
    """Remote reasoning model served through the Google GenAI SDK.

    The client is created lazily on first use so a session can start (and use
    the other providers) without ``GEMINI_API_KEY`` being set.
    """

    id = ModelId.GEMINI_3
    name = "Gemini 3.0 Pro"
    description = "Advanced reasoning via Google GenAI SDK"
    is_local = False

    def __init__(self, config: LLMConfig, client: genai.Client | None = None) -> None:
        self.config = config
        self.model = config.gemini_model
        self.timeout_seconds = config.timeout_seconds
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is not None:
            return self._client
        if not self.config.gemini_api_key:
            raise ProviderAuthError(
                "Missing GEMINI_API_KEY environment variable. "
                "Please set it in your .env file. "
                "Get your key from: https://aistudio.google.com/app/apikey",
                provider_id=self.id.value,
            )
        self._client = genai.Client(api_key=self.config.gemini_api_key)
        logger.info("Gemini client initialized", extra={"model": self.model})
        return self._client

    def _build_config(self, system_instruction: str) -> genai_types.GenerateContentConfig:
        config_kwargs: dict[str, Any] = {"system_instruction": system_instruction or None}
        if self.config.gemini_thinking_budget:
            config_kwargs["thinking_config"] = genai_types.ThinkingConfig(
                thinking_budget=self.config.gemini_thinking_budget,
            )
        return genai_types.GenerateContentConfig(**config_kwargs)

    async def generate(self, prompt: str, system_instruction: str = "", context: str = "") -> str:
        client = self._get_client()

        logger.debug(f"Generating completion for prompt: {prompt[:100]}...")

        try:
            response = await self._with_timeout(
                client.aio.models.generate_content(
                    model=self.model,
                    contents=build_user_message(prompt, context),
                    config=self._build_config(system_instruction),
                ),
                self.timeout_seconds,
            )
        except ProviderError:
            raise
        except genai_errors.APIError as e:
            raise classify_gemini_error(e) from e
        except Exception as e:
            raise ProviderGenericError(f"Gemini API Error: {e}", provider_id=self.id.value) from e

        content = self._require_text(response.text)
        logger.debug(f"Generated {len(content)} characters")
        return content
