"""Custom exceptions for the xAI Grok service."""


class GrokAPIError(Exception):
    """Base exception for Grok API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GrokAuthError(GrokAPIError):
    """Authentication failed (401/403) or no API key configured."""

    pass


class GrokRateLimitError(GrokAPIError):
    """Rate limit exceeded (429)."""

    pass


class GrokBadRequestError(GrokAPIError):
    """Invalid request parameters (400)."""

    pass


class GrokServerError(GrokAPIError):
    """Server-side error (5xx)."""

    pass
