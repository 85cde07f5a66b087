"""Reasoning service: free-text completions from an OpenAI-compatible LLM."""

import logging
from typing import Optional, Protocol

from openai import AsyncOpenAI

from wanderlust.core.config import settings

logger = logging.getLogger(__name__)


class ReasoningServiceError(RuntimeError):
    """The reasoning service failed or returned nothing usable."""


class ReasoningService(Protocol):
    async def complete(self, prompt: str) -> str: ...


class OpenAIReasoningService:
    """Single-prompt completions through the OpenAI SDK.

    Works against any OpenAI-compatible endpoint; the default base URL points
    at Gemini's compatibility layer.
    """

    def __init__(
        self,
        api_key: Optional[str] = settings.REASONING_API_KEY,
        base_url: Optional[str] = settings.REASONING_BASE_URL,
        model: str = settings.REASONING_MODEL,
        timeout: float = settings.REASONING_TIMEOUT,
        temperature: float = settings.REASONING_TEMPERATURE,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self.temperature = temperature
        self._client = client

        if self._client is None and api_key:
            self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        if self._client is None:
            logger.warning("No reasoning service API key configured; narrative calls will fall back.")

    async def complete(self, prompt: str) -> str:
        """Send `prompt` as a single user message and return the reply text.

        Raises:
            ReasoningServiceError: if no client is configured, the provider
                call fails, or the reply is empty.
        """
        if self._client is None:
            raise ReasoningServiceError("Reasoning service is not configured")

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            logger.warning(f"Reasoning service call failed: {e}")
            raise ReasoningServiceError(str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise ReasoningServiceError("Reasoning service returned an empty completion")
        return content.strip()
