"""Pydantic models for the Researcher agent."""

import json
from enum import StrEnum
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SkipValidation, field_validator
from pydantic_ai.messages import ModelMessage

from augur.config import ResearchConfig, SearchConfig
from augur.services.gemini.client import GeminiClient
from augur.services.grok.client import GrokClient
from augur.services.youtube.client import TranscriptClient
from augur.storage.scratchpad import ConfidenceTier, Scratchpad


class MarketQuestion(BaseModel):
    """A binary-outcome market as supplied by the caller. Never mutated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    question: str
    description: str = ""
    outcomes: list[str] = Field(default_factory=lambda: ["Yes", "No"])
    outcome_prices: list[float] = Field(
        default_factory=list,
        validation_alias=AliasChoices("outcome_prices", "outcomePrices"),
        description="Current price per outcome (0-1), parallel to outcomes",
    )
    volume: float = 0.0
    liquidity: float = 0.0
    end_date: str = Field(
        default="",
        validation_alias=AliasChoices("end_date", "endDate"),
    )
    category: str = ""

    @field_validator("outcomes", "outcome_prices", mode="before")
    @classmethod
    def parse_encoded_list(cls, v):
        """Polymarket encodes these lists as JSON strings."""
        if isinstance(v, str):
            return json.loads(v)
        return v


class RunState(StrEnum):
    """Research loop states. FINALIZED and BUDGET_EXHAUSTED are terminal."""

    RUNNING = "running"
    FINALIZED = "finalized"
    BUDGET_EXHAUSTED = "budget_exhausted"


class VerdictPath(StrEnum):
    """Which path produced a verdict."""

    FINALIZED = "finalized"
    FALLBACK = "fallback"


class Verdict(BaseModel):
    """Final research call on a market."""

    recommended_position: Literal["yes", "no", "none"]
    confidence: ConfidenceTier
    thesis: str
    edge: str
    key_risks: list[str] = Field(default_factory=list)
    what_would_flip: str
    path: VerdictPath


class ResearchDependencies(BaseModel):
    """Everything a tool handler may touch during one run."""

    model_config = {"arbitrary_types_allowed": True}

    scratchpad: Scratchpad
    config: ResearchConfig = Field(default_factory=ResearchConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    grok_client: GrokClient | None = None
    gemini_client: GeminiClient | None = None
    transcript_client: TranscriptClient | None = None

    # Set by the finalize_research tool
    finalized: bool = False
    final_verdict: Verdict | None = None


class ResearchResult(BaseModel):
    """Verdict plus the full trace of the run that produced it."""

    model_config = {"arbitrary_types_allowed": True}

    market_id: str
    verdict: Verdict
    state: RunState
    model_name: str
    tool_calls: int
    stalled_turns: int
    max_tool_calls: int
    turns: int
    thinking_blocks: int
    messages: SkipValidation[list[ModelMessage]]
    scratchpad: Scratchpad
