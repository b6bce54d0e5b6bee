"""Researcher Agent: tool-using research loop for a single market."""

from augur.agents.researcher.main import ResearchSession, research_market, run_research
from augur.agents.researcher.models import (
    MarketQuestion,
    ResearchDependencies,
    ResearchResult,
    RunState,
    Verdict,
    VerdictPath,
)

__all__ = [
    "run_research",
    "research_market",
    "ResearchSession",
    "MarketQuestion",
    "ResearchDependencies",
    "ResearchResult",
    "RunState",
    "Verdict",
    "VerdictPath",
]
