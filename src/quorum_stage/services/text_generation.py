"""Client for the external text-generation service.

Used to produce plain-language ("explain like I'm five") versions of
answers. Generation never raises to callers: every failure comes back as a
``GenerationResult`` with ``text`` unset and ``error`` describing why.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from quorum_stage.core.settings import settings

logger = logging.getLogger(__name__)

HTTP_OK = 200

ELI5_PROMPT = (
    "Explain the following answer in very simple terms, as if to a five year old. "
    "Use short sentences and everyday examples. Keep it under 200 words.\n\n"
    "Question: {title}\n\nAnswer: {content}"
)


class TextGenerationError(RuntimeError):
    """Base exception raised for text-generation failures."""


class TextGenerationDisabledError(TextGenerationError):
    """Raised when generation is attempted while the integration is disabled."""


@dataclass(frozen=True)
class TextGenerationConfig:
    """Connection settings for the text-generation service."""

    enabled: bool
    base_url: str
    model: str
    api_key: str | None
    timeout_seconds: float


@dataclass(frozen=True)
class GenerationResult:
    """Generated text, or the reason generation failed."""

    text: str | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.text is not None


def load_text_generation_config() -> TextGenerationConfig:
    """Build configuration object from global settings."""

    return TextGenerationConfig(
        enabled=bool(settings.text_generation_enabled and settings.text_generation_api_key),
        base_url=settings.text_generation_base_url,
        model=settings.text_generation_model,
        api_key=settings.text_generation_api_key,
        timeout_seconds=float(settings.text_generation_timeout_seconds),
    )


def _extract_text(payload: Any) -> str | None:
    """Join the text parts of the first candidate; None for any other shape."""
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return None
    text = "".join(
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    ).strip()
    return text or None


class TextGenerationClient:
    """HTTP client wrapper for the ``generateContent`` endpoint."""

    def __init__(
        self,
        config: TextGenerationConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_text_generation_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.config.enabled and bool(self.config.api_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise TextGenerationDisabledError("Text generation is not enabled")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    async def generate(self, prompt: str) -> GenerationResult:
        """Send a single-turn prompt and return the generated text."""
        try:
            client = await self._ensure_client()
            response = await client.post(
                f"/models/{self.config.model}:generateContent",
                json={"contents": [{"role": "user", "parts": [{"text": prompt}]}]},
                headers={"x-goog-api-key": self.config.api_key or ""},
            )
        except TextGenerationDisabledError as exc:
            return GenerationResult(text=None, error=str(exc))
        except httpx.HTTPError as exc:
            logger.warning("Text generation request failed: %s", exc)
            return GenerationResult(text=None, error="Text generation service unavailable")

        if response.status_code != HTTP_OK:
            logger.warning(
                "Text generation returned status %s: %s",
                response.status_code,
                response.text[:200],
            )
            return GenerationResult(
                text=None,
                error=f"Text generation failed with status {response.status_code}",
            )

        try:
            text = _extract_text(response.json())
        except ValueError:
            logger.warning("Text generation returned a non-JSON body")
            text = None
        if text is None:
            return GenerationResult(text=None, error="Text generation returned no content")
        return GenerationResult(text=text)

    async def explain_simply(self, *, title: str, content: str) -> GenerationResult:
        """Generate a plain-language explanation of an answer."""
        return await self.generate(ELI5_PROMPT.format(title=title, content=content))

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""

        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _TextGenerationClientSingleton:
    """Singleton wrapper for TextGenerationClient."""

    _instance: TextGenerationClient | None = None

    @classmethod
    def get_instance(cls) -> TextGenerationClient:
        """Get or create the singleton client instance."""
        if cls._instance is None:
            cls._instance = TextGenerationClient()
        return cls._instance


def get_text_generation_client() -> TextGenerationClient:
    """Return a singleton text-generation client instance."""
    return _TextGenerationClientSingleton.get_instance()
