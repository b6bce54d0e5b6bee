"""Async Gemini client for processing bulk text (summaries, extraction, analysis)."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any

import httpx

from .config import GeminiConfig
from .exceptions import (
    GeminiAPIError,
    GeminiAuthError,
    GeminiRateLimitError,
    GeminiResponseError,
)
from .models import GeminiResult, TextMetadata

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """{instruction}

---
TEXT TO PROCESS:
{text}
---

Respond with only the requested output, no preamble."""


def get_text_metadata(text: str) -> TextMetadata:
    """Word/char/line counts plus a rough token estimate."""
    words = len(text.split())
    return TextMetadata(
        words=words,
        chars=len(text),
        lines=len(text.split("\n")),
        estimated_tokens=math.ceil(words * 1.3),
    )


class GeminiClient:
    """Async Gemini generateContent client with retry logic."""

    def __init__(
        self,
        api_key: str,
        config: GeminiConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.config = config or GeminiConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        logger.info("Initialized GeminiClient")

    async def __aenter__(self) -> GeminiClient:
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            # Request URLs are traced; the key must only travel in this header
            headers={"x-goog-api-key": self.api_key},
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: Any,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Closed GeminiClient")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GeminiClient must be used as async context manager")
        return self._client

    async def process(
        self,
        text: str,
        instruction: str,
        model: str | None = None,
    ) -> GeminiResult:
        """Apply ``instruction`` to ``text`` and return the generated output.

        Args:
            text: The bulk text to process (can be very large)
            instruction: What to do with it (summarize, extract, analyze)
            model: Override the configured Gemini model
        """
        if not self.api_key:
            raise GeminiAuthError("GEMINI_API_KEY not set")

        model = model or self.config.model
        payload = {
            "contents": [
                {"parts": [{"text": PROMPT_TEMPLATE.format(instruction=instruction, text=text)}]}
            ],
            "generationConfig": {
                "temperature": self.config.temperature,
                "maxOutputTokens": self.config.max_output_tokens,
            },
        }

        data = await self._post(f"models/{model}:generateContent", payload)

        try:
            result = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise GeminiResponseError("Unexpected Gemini response format")

        usage = data.get("usageMetadata") or {}
        return GeminiResult(
            result=result,
            input_tokens=usage.get("promptTokenCount", 0),
            output_tokens=usage.get("candidatesTokenCount", 0),
            total_tokens=usage.get("totalTokenCount", 0),
            model=model,
        )

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        retry_count = 0
        last_error: Exception | None = None

        while retry_count < self.config.max_retries:
            try:
                response = await self.client.post(endpoint, json=payload)
            except httpx.TimeoutException as e:
                last_error = e
                retry_count += 1
                logger.warning(f"Gemini timeout, retrying ({retry_count})...")
                continue
            except httpx.RequestError as e:
                raise GeminiAPIError(f"Network error: {e}") from e

            if response.status_code in (401, 403):
                raise GeminiAuthError("Authentication failed", status_code=response.status_code)
            elif response.status_code == 429 or response.status_code >= 500:
                wait_time = self.config.retry_base_seconds * 2**retry_count
                logger.warning(
                    f"Gemini returned {response.status_code}, retrying in {wait_time}s..."
                )
                last_error = (
                    GeminiRateLimitError("Rate limited", status_code=429)
                    if response.status_code == 429
                    else GeminiAPIError(
                        f"Server error: {response.text}", status_code=response.status_code
                    )
                )
                await asyncio.sleep(wait_time)
                retry_count += 1
                continue
            elif response.status_code >= 300:
                raise GeminiAPIError(
                    f"Gemini API error: {response.status_code} - {response.text}",
                    status_code=response.status_code,
                )

            return response.json()

        if isinstance(last_error, GeminiAPIError):
            raise last_error
        raise GeminiAPIError(f"Request failed after {retry_count} retries: {last_error}")
