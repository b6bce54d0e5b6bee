"""Configuration for the xAI Grok live-search client."""

from pydantic import BaseModel

DEFAULT_SYSTEM_PROMPT = (
    "You are an intelligence analyst researching prediction markets. "
    "Provide factual, well-sourced information. Include specific data points, "
    "quotes, and sentiment where relevant."
)


class GrokConfig(BaseModel):
    """Configuration for Grok API client."""

    base_url: str = "https://api.x.ai/v1"
    model: str = "grok-4"
    timeout_seconds: float = 120.0
    max_retries: int = 3
    retry_base_seconds: float = 1.0
    default_max_results: int = 20
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
