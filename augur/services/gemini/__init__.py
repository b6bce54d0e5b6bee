"""Google Gemini bulk-text service integration."""

from .client import GeminiClient, get_text_metadata
from .config import GeminiConfig
from .exceptions import (
    GeminiAPIError,
    GeminiAuthError,
    GeminiRateLimitError,
    GeminiResponseError,
)
from .models import GeminiResult, TextMetadata

__all__ = [
    "GeminiClient",
    "get_text_metadata",
    "GeminiConfig",
    "GeminiAPIError",
    "GeminiAuthError",
    "GeminiRateLimitError",
    "GeminiResponseError",
    "GeminiResult",
    "TextMetadata",
]
