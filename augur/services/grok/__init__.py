"""xAI Grok search service integration."""

from .client import GrokClient
from .config import GrokConfig
from .exceptions import (
    GrokAPIError,
    GrokAuthError,
    GrokBadRequestError,
    GrokRateLimitError,
    GrokServerError,
)
from .models import GrokSearchParams, GrokSearchResult

__all__ = [
    "GrokClient",
    "GrokConfig",
    "GrokAPIError",
    "GrokAuthError",
    "GrokBadRequestError",
    "GrokRateLimitError",
    "GrokServerError",
    "GrokSearchParams",
    "GrokSearchResult",
]
