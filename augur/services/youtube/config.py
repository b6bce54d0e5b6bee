"""Configuration for the YouTube transcript client."""

from pydantic import BaseModel, Field


class TranscriptConfig(BaseModel):
    """Configuration for transcript retrieval."""

    languages: list[str] = Field(default_factory=lambda: ["en"])
    oembed_url: str = "https://www.youtube.com/oembed"
    timeout_seconds: float = 15.0
