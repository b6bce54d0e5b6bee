"""Verdict construction for both ways a research run can end."""

import logging

from augur.agents.researcher.args import FinalizeArgs
from augur.agents.researcher.models import Verdict, VerdictPath
from augur.storage.scratchpad import ConfidenceTier, Scratchpad, Synthesis

logger = logging.getLogger(__name__)

NO_THESIS = "Research incomplete - no clear thesis developed"
INCOMPLETE_EDGE = "Research did not complete - edge unclear"
MORE_RESEARCH_NEEDED = "More research needed"
FALLBACK_RISKS_SHOWN = 5


def confidence_tier(confidence: float) -> ConfidenceTier:
    """Map a 0-100 hypothesis confidence onto the verdict tiers."""
    if confidence > 70:
        return "high"
    if confidence > 40:
        return "medium"
    return "low"


def verdict_from_finalize(args: FinalizeArgs) -> Verdict:
    """The verdict is exactly what the agent passed to finalize_research."""
    return Verdict(
        recommended_position=args.recommended_position,
        confidence=args.confidence,
        thesis=args.thesis,
        edge=args.edge,
        key_risks=list(args.key_risks),
        what_would_flip=args.what_would_flip,
        path=VerdictPath.FINALIZED,
    )


def synthesis_from_verdict(verdict: Verdict) -> Synthesis:
    return Synthesis(
        recommended_position=verdict.recommended_position,
        confidence=verdict.confidence,
        thesis=verdict.thesis,
        key_risks=list(verdict.key_risks),
        what_would_flip=verdict.what_would_flip,
    )


def fallback_verdict(scratchpad: Scratchpad) -> Verdict:
    """Best-effort verdict for a run that used its budget without finalizing.

    Picks the most confident hypothesis (the earliest one on ties). Works on any
    scratchpad, including an empty one.
    """
    best = None
    for hypothesis in scratchpad.hypotheses.values():
        if best is None or hypothesis.confidence > best.confidence:
            best = hypothesis

    if best is None:
        logger.info(f"No hypotheses for {scratchpad.market_id}; falling back to 'none'")

    return Verdict(
        recommended_position=best.position if best else "none",
        confidence=confidence_tier(best.confidence) if best else "low",
        thesis=(best.thesis if best and best.thesis else NO_THESIS),
        edge=INCOMPLETE_EDGE,
        key_risks=scratchpad.uncertainties[:FALLBACK_RISKS_SHOWN],
        what_would_flip=MORE_RESEARCH_NEEDED,
        path=VerdictPath.FALLBACK,
    )
