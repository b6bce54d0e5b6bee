"""Pydantic models for YouTube transcripts."""

from pydantic import BaseModel, Field


class TranscriptSegment(BaseModel):
    """One caption line with its position in the video (seconds)."""

    text: str
    start: float
    duration: float

    @property
    def timestamp(self) -> str:
        seconds = int(self.start)
        hours, remainder = divmod(seconds, 3600)
        minutes, secs = divmod(remainder, 60)
        if hours:
            return f"{hours}:{minutes:02d}:{secs:02d}"
        return f"{minutes}:{secs:02d}"


class VideoTranscript(BaseModel):
    """Full transcript of a video."""

    video_id: str
    url: str
    title: str = "Unknown title"
    channel: str = "Unknown channel"
    full_text: str
    segments: list[TranscriptSegment] = Field(default_factory=list)
    language: str | None = None
