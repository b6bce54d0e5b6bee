"""Custom exceptions for the Gemini service."""


class GeminiAPIError(Exception):
    """Base exception for Gemini API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GeminiAuthError(GeminiAPIError):
    """Missing or rejected API key."""

    pass


class GeminiRateLimitError(GeminiAPIError):
    """Rate limit exceeded (429)."""

    pass


class GeminiResponseError(GeminiAPIError):
    """Response did not contain generated text."""

    pass
