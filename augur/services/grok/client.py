"""Async client for xAI Grok live search (X/Twitter, web and news)."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta
from typing import Any

import httpx

from .config import GrokConfig
from .exceptions import (
    GrokAPIError,
    GrokAuthError,
    GrokBadRequestError,
    GrokRateLimitError,
    GrokServerError,
)
from .models import GrokSearchParams, GrokSearchResult

logger = logging.getLogger(__name__)

RESEARCH_PROMPT = """Research the following topic for prediction market analysis. Include:
- Current news and developments
- Twitter/X sentiment and insider opinions
- Key events or announcements
- Anything that could affect the outcome

Topic: {topic}"""

SENTIMENT_PROMPT = """What is Twitter/X saying about: {topic}

Summarize the overall sentiment, notable accounts weighing in, and any
claims or rumors that are gaining traction."""


class GrokClient:
    """Async Grok live-search client with retry logic and error handling."""

    def __init__(
        self,
        api_key: str,
        config: GrokConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.config = config or GrokConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        logger.info("Initialized GrokClient")

    async def __aenter__(self) -> GrokClient:
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
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
            logger.info("Closed GrokClient")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GrokClient must be used as async context manager")
        return self._client

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise GrokAuthError("XAI_API_KEY not set")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        retry_count = 0
        last_error: Exception | None = None

        while retry_count < self.config.max_retries:
            try:
                response = await self.client.post(endpoint, json=payload, headers=headers)
            except httpx.TimeoutException as e:
                last_error = e
                retry_count += 1
                logger.warning(f"Grok timeout, retrying ({retry_count})...")
                continue
            except httpx.RequestError as e:
                raise GrokAPIError(f"Network error: {e}") from e

            if response.status_code in (401, 403):
                raise GrokAuthError("Authentication failed", status_code=response.status_code)
            elif response.status_code == 400:
                raise GrokBadRequestError(
                    f"Invalid request: {response.text}", status_code=400
                )
            elif response.status_code == 429 or response.status_code >= 500:
                wait_time = self.config.retry_base_seconds * 2**retry_count
                logger.warning(
                    f"Grok returned {response.status_code}, retrying in {wait_time}s..."
                )
                last_error = (
                    GrokRateLimitError("Rate limited", status_code=429)
                    if response.status_code == 429
                    else GrokServerError(
                        f"Server error: {response.text}", status_code=response.status_code
                    )
                )
                await asyncio.sleep(wait_time)
                retry_count += 1
                continue
            elif response.status_code >= 300:
                raise GrokAPIError(
                    f"Grok API error: {response.status_code} - {response.text}",
                    status_code=response.status_code,
                )

            return response.json()

        if isinstance(last_error, GrokAPIError):
            raise last_error
        raise GrokAPIError(f"Request failed after {retry_count} retries: {last_error}")

    def _build_search_parameters(self, params: GrokSearchParams) -> dict[str, Any]:
        sources: list[dict[str, Any]] = []

        if "web" in params.sources:
            sources.append({"type": "web"})
        if "x" in params.sources:
            x_source: dict[str, Any] = {"type": "x"}
            if params.included_x_handles:
                x_source["included_x_handles"] = params.included_x_handles
            if params.post_favorite_count:
                x_source["post_favorite_count"] = params.post_favorite_count
            if params.post_view_count:
                x_source["post_view_count"] = params.post_view_count
            sources.append(x_source)
        if "news" in params.sources:
            sources.append({"type": "news"})

        search_parameters: dict[str, Any] = {
            "mode": "on",
            "return_citations": True,
            "max_search_results": params.max_results or self.config.default_max_results,
        }
        if sources:
            search_parameters["sources"] = sources
        if params.from_date:
            search_parameters["from_date"] = params.from_date.isoformat()
        if params.to_date:
            search_parameters["to_date"] = params.to_date.isoformat()

        return search_parameters

    async def search(self, params: GrokSearchParams) -> GrokSearchResult:
        """Run one live-search completion and return content plus citations."""
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": self.config.system_prompt},
                {"role": "user", "content": params.query},
            ],
            "search_parameters": self._build_search_parameters(params),
            "stream": False,
        }

        data = await self._post("chat/completions", payload)

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        return GrokSearchResult(
            content=content,
            citations=data.get("citations") or [],
            sources_used=(data.get("usage") or {}).get("num_sources_used", 0),
            model=self.config.model,
        )

    async def research_topic(
        self,
        topic: str,
        sources: list[str] | None = None,
        max_results: int | None = None,
    ) -> GrokSearchResult:
        """Broad research across web, X and news."""
        logger.info(f"Grok research: {topic}")
        return await self.search(
            GrokSearchParams(
                query=RESEARCH_PROMPT.format(topic=topic),
                sources=sources or ["web", "x", "news"],
                max_results=max_results,
            )
        )

    async def x_sentiment(self, topic: str, days_back: int = 7) -> GrokSearchResult:
        """Narrow X-only sentiment check over the last ``days_back`` days."""
        logger.info(f"Grok X sentiment ({days_back}d): {topic}")
        today = date.today()
        return await self.search(
            GrokSearchParams(
                query=SENTIMENT_PROMPT.format(topic=topic),
                sources=["x"],
                from_date=today - timedelta(days=days_back),
                to_date=today,
            )
        )
