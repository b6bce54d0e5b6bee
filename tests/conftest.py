"""Shared fixtures for the Augur test suite."""

from __future__ import annotations

import pytest

from augur.agents.researcher.models import MarketQuestion, ResearchDependencies
from augur.config import ResearchConfig, SearchConfig, Settings
from augur.storage.scratchpad import Scratchpad
from fakes import FakeGeminiClient, FakeGrokClient, FakeTranscriptClient

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def market() -> MarketQuestion:
    return MarketQuestion(
        id="fed-hold-dec",
        question="Will the Fed hold rates in December?",
        description="Resolves YES if the target range is unchanged.",
        outcomes=["Yes", "No"],
        outcome_prices=[0.62, 0.38],
        volume=1_250_000,
        liquidity=85_000,
        end_date="2025-12-10",
        category="Economics",
    )


@pytest.fixture
def scratchpad(market: MarketQuestion) -> Scratchpad:
    return Scratchpad(market_id=market.id, market_question=market.question)


@pytest.fixture
def research_config() -> ResearchConfig:
    return ResearchConfig(max_tool_calls=5, enable_thinking=False)


@pytest.fixture
def grok() -> FakeGrokClient:
    return FakeGrokClient()


@pytest.fixture
def deps(
    scratchpad: Scratchpad, research_config: ResearchConfig, grok: FakeGrokClient
) -> ResearchDependencies:
    return ResearchDependencies(
        scratchpad=scratchpad,
        config=research_config,
        search=SearchConfig(),
        grok_client=grok,
        gemini_client=FakeGeminiClient(),
        transcript_client=FakeTranscriptClient(),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=tmp_path,
        anthropic_api_key="",
        xai_api_key="",
        gemini_api_key="",
        logfire_token="",
    )
