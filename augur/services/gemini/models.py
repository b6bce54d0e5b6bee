"""Pydantic models for Gemini responses."""

from pydantic import BaseModel


class GeminiResult(BaseModel):
    """Processed text plus token accounting."""

    result: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    model: str


class TextMetadata(BaseModel):
    """Size of a text, used to decide whether to hand it to Gemini."""

    words: int
    chars: int
    lines: int
    estimated_tokens: int
