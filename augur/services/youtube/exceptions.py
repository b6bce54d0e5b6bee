"""Custom exceptions for the YouTube transcript service."""


class TranscriptError(Exception):
    """Base exception for transcript retrieval errors."""

    def __init__(self, message: str, video_id: str | None = None):
        super().__init__(message)
        self.video_id = video_id


class InvalidVideoIdError(TranscriptError):
    """Could not extract an 11-character video ID from the input."""

    pass


class TranscriptUnavailableError(TranscriptError):
    """Video has no retrievable transcript (disabled, private, or missing)."""

    pass
