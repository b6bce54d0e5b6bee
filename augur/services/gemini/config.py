"""Configuration for the Gemini bulk-text client."""

from pydantic import BaseModel


class GeminiConfig(BaseModel):
    """Configuration for Gemini API client."""

    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.0-flash"
    temperature: float = 0.3
    max_output_tokens: int = 8192
    timeout_seconds: float = 120.0
    max_retries: int = 3
    retry_base_seconds: float = 1.0
