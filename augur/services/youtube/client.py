"""YouTube transcript fetcher.

Captions come from ``youtube-transcript-api`` (no API key needed, works with
auto-generated subtitles); title and channel come from YouTube's public oEmbed
endpoint.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

import httpx
from youtube_transcript_api import YouTubeTranscriptApi

from .config import TranscriptConfig
from .exceptions import (
    InvalidVideoIdError,
    TranscriptUnavailableError,
)
from .models import TranscriptSegment, VideoTranscript

logger = logging.getLogger(__name__)

_VIDEO_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{11}$")
_URL_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})"),
]


def extract_video_id(url_or_id: str) -> str:
    """Extract the video ID from a bare ID or any common YouTube URL format."""
    candidate = url_or_id.strip()
    if _VIDEO_ID_RE.match(candidate):
        return candidate

    for pattern in _URL_PATTERNS:
        match = pattern.search(candidate)
        if match:
            return match.group(1)

    raise InvalidVideoIdError(f"Could not extract video ID from: {url_or_id}")


def get_transcript_preview(transcript: VideoTranscript, max_chars: int = 5000) -> str:
    """First ``max_chars`` of the transcript, cut at a word boundary."""
    text = transcript.full_text
    if len(text) <= max_chars:
        return text
    cut = text.rfind(" ", 0, max_chars)
    return text[: cut if cut > 0 else max_chars] + " ..."


class TranscriptClient:
    """Async wrapper around youtube-transcript-api plus oEmbed metadata."""

    def __init__(
        self,
        config: TranscriptConfig | None = None,
        api: Any | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or TranscriptConfig()
        self._api = api or YouTubeTranscriptApi()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TranscriptClient:
        self._client = httpx.AsyncClient(
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

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("TranscriptClient must be used as async context manager")
        return self._client

    async def fetch(self, url_or_id: str) -> VideoTranscript:
        """Fetch the full transcript with title/channel metadata."""
        video_id = extract_video_id(url_or_id)
        url = f"https://youtube.com/watch?v={video_id}"

        try:
            fetched = await asyncio.to_thread(
                self._api.fetch, video_id, languages=self.config.languages
            )
        except Exception as e:
            raise TranscriptUnavailableError(
                f"Failed to fetch transcript for {video_id}: {e}", video_id=video_id
            ) from e

        segments = [
            TranscriptSegment(text=s.text, start=s.start, duration=s.duration)
            for s in fetched
        ]
        if not segments:
            raise TranscriptUnavailableError(
                f"Transcript for {video_id} is empty", video_id=video_id
            )

        title, channel = await self._fetch_metadata(url)

        return VideoTranscript(
            video_id=video_id,
            url=url,
            title=title,
            channel=channel,
            full_text=" ".join(s.text for s in segments),
            segments=segments,
            language=getattr(fetched, "language_code", None),
        )

    async def _fetch_metadata(self, url: str) -> tuple[str, str]:
        """Title and channel via oEmbed; falls back to placeholders."""
        try:
            response = await self.client.get(
                self.config.oembed_url, params={"url": url, "format": "json"}
            )
            response.raise_for_status()
            data = response.json()
            return (
                data.get("title") or "Unknown title",
                data.get("author_name") or "Unknown channel",
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"oEmbed lookup failed for {url}: {e}")
            return "Unknown title", "Unknown channel"


