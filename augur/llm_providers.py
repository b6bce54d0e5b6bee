"""Model names for the reasoning service.

The research loop accepts either a short alias ("opus", "sonnet"), a
pydantic-ai model string, or a ready-made pydantic-ai ``Model`` instance.
"""

from enum import StrEnum

from pydantic_ai.models import Model


class AnthropicModel(StrEnum):
    """Anthropic Claude models available via API."""

    CLAUDE_OPUS_4_5 = "claude-opus-4-5"
    CLAUDE_SONNET_4_5 = "claude-sonnet-4-5"
    CLAUDE_HAIKU_4_5 = "claude-haiku-4-5"


MODEL_ALIASES: dict[str, AnthropicModel] = {
    "opus": AnthropicModel.CLAUDE_OPUS_4_5,
    "sonnet": AnthropicModel.CLAUDE_SONNET_4_5,
    "haiku": AnthropicModel.CLAUDE_HAIKU_4_5,
}


def get_model_string(model: AnthropicModel) -> str:
    return f"anthropic:{model.value}"


def resolve_model(model: str | Model) -> str | Model:
    """Turn an alias into a model string; pass model strings and instances through."""
    if isinstance(model, Model):
        return model
    alias = MODEL_ALIASES.get(model.lower())
    if alias is not None:
        return get_model_string(alias)
    return model


def describe_model(model: str | Model) -> str:
    """Human-readable model name for logs and transcripts."""
    if isinstance(model, Model):
        return model.model_name
    return str(resolve_model(model))
