"""Lenient decoding of tool arguments sent by the reasoning service.

Tool-call arguments come from the model, so they are untrusted. Each field
coerces whatever arrives into a value of the right type, falling back to a safe
default, and decoding a whole argument bundle never raises.
"""

import json
import logging
import math
from typing import Annotated, Any, ClassVar, Literal, Self

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, WithJsonSchema

logger = logging.getLogger(__name__)


def _coerce_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _coerce_text_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    items = [_coerce_text(item) for item in value]
    return [item for item in items if item.strip()]


def _coerce_confidence(value: Any) -> float:
    """Numbers and numeric strings ("65", "65%") clamped to [0, 100]; anything else is 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return min(max(number, 0.0), 100.0)


def _choice(allowed: tuple[str, ...], default: str | None):
    def coerce(value: Any) -> str | None:
        if isinstance(value, str) and value.strip().lower() in allowed:
            return value.strip().lower()
        return default

    return coerce


def _coerce_sources(value: Any) -> list[str]:
    pick = _choice(SEARCH_SOURCES, None)
    picked = [pick(item) for item in _coerce_text_list(value)]
    return [item for item in picked if item is not None]


SEARCH_SOURCES = ("twitter", "web", "news")

Text = Annotated[str, BeforeValidator(_coerce_text)]
TextList = Annotated[list[str], BeforeValidator(_coerce_text_list)]
Confidence = Annotated[float, BeforeValidator(_coerce_confidence)]
SearchSources = Annotated[
    list[Literal["twitter", "web", "news"]], BeforeValidator(_coerce_sources)
]
HypothesisPosition = Annotated[
    Literal["yes", "no"] | None,
    BeforeValidator(_choice(("yes", "no"), None)),
    WithJsonSchema(
        {
            "type": "string",
            "enum": ["yes", "no"],
            "description": "Which position this hypothesis is for",
        }
    ),
]
RecommendedPosition = Annotated[
    Literal["yes", "no", "none"],
    BeforeValidator(_choice(("yes", "no", "none"), "none")),
]
ConfidenceLevel = Annotated[
    Literal["low", "medium", "high"],
    BeforeValidator(_choice(("low", "medium", "high"), "low")),
]


class ToolArgs(BaseModel):
    """Base for tool argument bundles."""

    model_config = ConfigDict(extra="ignore")

    REQUIRED: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def decode(cls, raw: Any) -> Self:
        """Decode raw tool-call arguments (dict, JSON string, or junk)."""
        if isinstance(raw, str):
            try:
                raw = json.loads(raw) if raw.strip() else {}
            except ValueError:
                logger.warning(f"Unparseable arguments for {cls.__name__}: {raw[:200]!r}")
                raw = {}
        if not isinstance(raw, dict):
            raw = {}

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Falling back to defaults for {cls.__name__}: {e}")
            return cls()

    @classmethod
    def parameters_json_schema(cls) -> dict[str, Any]:
        """JSON schema advertised to the reasoning service."""
        schema = cls.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
            prop.pop("default", None)
        schema["required"] = list(cls.REQUIRED)
        return schema


class SearchArgs(ToolArgs):
    REQUIRED = ("query",)

    query: Text = Field(
        default="", description="Search query - be specific about what you want to find"
    )
    sources: SearchSources = Field(
        default_factory=list, description="Which sources to search (default: all)"
    )
    focus: Text = Field(
        default="",
        description=(
            'Optional: specific angle to focus on (e.g., "insider opinions", '
            '"recent developments", "contrarian views")'
        ),
    )


class BulkTextArgs(ToolArgs):
    REQUIRED = ("text", "instruction")

    text: Text = Field(default="", description="The text to process")
    instruction: Text = Field(
        default="",
        description="What to do with the text (summarize, extract facts, analyze for prediction, etc.)",
    )


class TranscriptArgs(ToolArgs):
    REQUIRED = ("video_id",)

    video_id: Text = Field(
        default="", description="YouTube video ID (the part after v= in the URL) or full URL"
    )


class ReadArgs(ToolArgs):
    pass


class FactArgs(ToolArgs):
    REQUIRED = ("fact",)

    fact: Text = Field(default="", description="The fact to record")


class SignalArgs(ToolArgs):
    REQUIRED = ("signal",)

    signal: Text = Field(default="", description="The signal to record")


class UncertaintyArgs(ToolArgs):
    REQUIRED = ("uncertainty",)

    uncertainty: Text = Field(default="", description="The uncertainty or open question")


class NoteArgs(ToolArgs):
    REQUIRED = ("note",)

    note: Text = Field(default="", description="Your note")


class HypothesisArgs(ToolArgs):
    REQUIRED = ("position", "thesis", "confidence")

    position: HypothesisPosition = None
    thesis: Text = Field(default="", description="Your current thesis for this position")
    confidence: Confidence = Field(default=0.0, ge=0, le=100, description="Confidence 0-100")
    new_evidence: TextList = Field(
        default_factory=list, description="New evidence supporting this hypothesis"
    )
    new_counter_evidence: TextList = Field(
        default_factory=list, description="New evidence against this hypothesis"
    )


class FinalizeArgs(ToolArgs):
    REQUIRED = (
        "recommended_position",
        "confidence",
        "thesis",
        "edge",
        "key_risks",
        "what_would_flip",
    )

    recommended_position: RecommendedPosition = Field(
        default="none", description="Your recommended position"
    )
    confidence: ConfidenceLevel = Field(default="low", description="Your confidence level")
    thesis: Text = Field(
        default="",
        description="Your final thesis - clear statement of what will happen and why",
    )
    edge: Text = Field(
        default="", description="What edge do you have? What is the market missing?"
    )
    key_risks: TextList = Field(default_factory=list, description="Key risks to this thesis")
    what_would_flip: Text = Field(
        default="",
        description="What specific observable conditions would flip your call?",
    )
