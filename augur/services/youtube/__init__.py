"""YouTube transcript service integration."""

from .client import TranscriptClient, extract_video_id, get_transcript_preview
from .config import TranscriptConfig
from .exceptions import (
    InvalidVideoIdError,
    TranscriptError,
    TranscriptUnavailableError,
)
from .models import TranscriptSegment, VideoTranscript

__all__ = [
    "TranscriptClient",
    "extract_video_id",
    "get_transcript_preview",
    "TranscriptConfig",
    "TranscriptError",
    "InvalidVideoIdError",
    "TranscriptUnavailableError",
    "TranscriptSegment",
    "VideoTranscript",
]
