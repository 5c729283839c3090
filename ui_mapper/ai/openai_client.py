"""Async OpenAI client wrapper with retry & singleton semantics."""
from __future__ import annotations

import asyncio
import random
from typing import Any

import openai  # type: ignore

from ..core.config import config
from ..core.logger import log
from .prompt import build_detection_messages

__all__ = ["OpenAIClient", "OpenAIDetectionBackend", "get_openai_client"]

# Vision-capable models
VISION_MODELS = [
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-4.1",
    "gpt-4.1-mini",
]

# Fallback when the configured model cannot read images
DEFAULT_VISION_MODEL = "gpt-4o"


class OpenAIClient:
    """Lightweight async wrapper around OpenAI chat completion API."""

    _instance: OpenAIClient | None = None

    @classmethod
    def instance(cls) -> OpenAIClient:
        """Return the singleton instance, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def __init__(self) -> None:
        """Initialize the underlying async OpenAI client (internal use)."""
        # Ensure singleton creation only once
        if OpenAIClient._instance is not None:
            raise RuntimeError("Use OpenAIClient.instance() instead of constructor")

        config.validate_detection_config()
        self._client = openai.AsyncOpenAI(api_key=config.openai_api_key)

        self.model = config.openai_model
        self.temperature = float(config.openai_temperature)
        self.max_tokens = int(config.openai_max_tokens)
        self.max_retries = int(config.detection_max_retries)
        self.base_backoff = float(config.detection_base_backoff)

    def _vision_model(self) -> str:
        if self.model in VISION_MODELS:
            return self.model
        log.info(f"Switching to vision-capable model: {DEFAULT_VISION_MODEL}")
        return DEFAULT_VISION_MODEL

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    async def get_completion(self, messages: list[dict[str, Any]]) -> str:
        """Send chat completion request with image content and return the reply text.

        Args:
            messages: Message list that may include ``image_url`` parts.

        """
        model = self._vision_model()

        for attempt in range(self.max_retries):
            try:
                response = await self._client.chat.completions.create(
                    model=model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                )
                content = response.choices[0].message.content  # type: ignore[attr-defined]
                if content is None:
                    raise RuntimeError("OpenAI returned empty content")
                return content
            except (openai.APIError, openai.RateLimitError) as exc:
                if attempt == self.max_retries - 1:
                    log.error(f"OpenAI request failed after {attempt+1} attempts: {exc}")
                    raise
                sleep_time = self.base_backoff * (2 ** attempt) + random.uniform(0, 0.5)  # noqa: S311
                log.warning(f"OpenAI error {exc}. Retrying in {sleep_time:.1f}s…")
                await asyncio.sleep(sleep_time)

        # Should not reach here
        raise RuntimeError("OpenAI chat completion failed after retries")


class OpenAIDetectionBackend:
    """Detection backend that asks a vision model for a component list."""

    def __init__(self, client: OpenAIClient | None = None) -> None:
        self._client = client

    @property
    def client(self) -> OpenAIClient:
        if self._client is None:
            self._client = OpenAIClient.instance()
        return self._client

    async def detect_raw(self, image_bytes: bytes, mime_type: str) -> str:
        """Return the model's raw reply for one screenshot."""
        messages = build_detection_messages(image_bytes, mime_type)
        return await self.client.get_completion(messages)


# Convenience getter
get_openai_client = OpenAIClient.instance
