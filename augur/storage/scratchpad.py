"""Scratchpad: per-market evidence store for the research agent.

Each market gets a workspace where the research agent can:
- Record facts, signals, uncertainties and free-form notes
- Track which sources have been consulted
- Build a hypothesis for each side with evidence and counter-evidence
- Hold the final synthesis once research is finalized

The scratchpad is plain data plus mutators. It is passed by reference into
every tool call of a run; persistence between runs is JSON on disk.
"""

import logging
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

Position = Literal["yes", "no"]
ConfidenceTier = Literal["low", "medium", "high"]
SourceType = Literal["grok", "gemini", "youtube", "web", "manual"]

RECENT_NOTES_SHOWN = 10


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Pydantic Models
# ============================================================================


class SourceRecord(BaseModel):
    """Provenance of one piece of gathered intelligence."""

    type: SourceType
    query: str | None = None
    url: str | None = None
    summary: str = ""
    recorded_at: datetime = Field(default_factory=_now)


class Hypothesis(BaseModel):
    """Working thesis for one side of the market."""

    position: Position
    thesis: str
    confidence: float = Field(description="Confidence 0-100")
    evidence: list[str] = Field(default_factory=list)
    counter_evidence: list[str] = Field(default_factory=list)
    added_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Synthesis(BaseModel):
    """Final synthesis written when research is finalized."""

    recommended_position: Literal["yes", "no", "none"]
    confidence: ConfidenceTier
    thesis: str
    key_risks: list[str] = Field(default_factory=list)
    what_would_flip: str


class Scratchpad(BaseModel):
    """Evidence accumulated for one market question."""

    market_id: str
    market_question: str
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    facts: list[str] = Field(default_factory=list)
    signals: list[str] = Field(default_factory=list)
    uncertainties: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    sources: list[SourceRecord] = Field(default_factory=list)
    hypotheses: dict[Position, Hypothesis] = Field(default_factory=dict)

    synthesis: Synthesis | None = None


# ============================================================================
# Mutators
# ============================================================================


def _touch(scratchpad: Scratchpad) -> None:
    scratchpad.updated_at = _now()


def _require_text(text: str, kind: str) -> str:
    if not text or not text.strip():
        raise ValueError(f"Cannot record an empty {kind}")
    return text


def add_fact(scratchpad: Scratchpad, fact: str) -> None:
    """Append a verified fact."""
    scratchpad.facts.append(_require_text(fact, "fact"))
    _touch(scratchpad)


def add_signal(scratchpad: Scratchpad, signal: str) -> None:
    """Append a directional signal."""
    scratchpad.signals.append(_require_text(signal, "signal"))
    _touch(scratchpad)


def add_uncertainty(scratchpad: Scratchpad, uncertainty: str) -> None:
    """Append an open question."""
    scratchpad.uncertainties.append(_require_text(uncertainty, "uncertainty"))
    _touch(scratchpad)


def append_note(scratchpad: Scratchpad, note: str) -> None:
    """Append a free-form note."""
    scratchpad.notes.append(_require_text(note, "note"))
    _touch(scratchpad)


def record_source(
    scratchpad: Scratchpad,
    source_type: SourceType,
    query: str | None = None,
    url: str | None = None,
    summary: str = "",
) -> SourceRecord:
    """Record that a source was consulted."""
    record = SourceRecord(type=source_type, query=query, url=url, summary=summary)
    scratchpad.sources.append(record)
    _touch(scratchpad)
    return record


def update_hypothesis(
    scratchpad: Scratchpad,
    position: Position,
    thesis: str,
    confidence: float,
    new_evidence: list[str] | None = None,
    new_counter_evidence: list[str] | None = None,
) -> Hypothesis:
    """Add or update the hypothesis for a position.

    Thesis and confidence are overwritten. Evidence and counter-evidence are
    appended to what the position already holds, in order, without
    de-duplication.
    """
    existing = scratchpad.hypotheses.get(position)
    now = _now()

    if existing is None:
        hypothesis = Hypothesis(
            position=position,
            thesis=thesis,
            confidence=confidence,
            evidence=list(new_evidence or []),
            counter_evidence=list(new_counter_evidence or []),
            added_at=now,
            updated_at=now,
        )
    else:
        hypothesis = existing.model_copy(
            update={
                "thesis": thesis,
                "confidence": confidence,
                "evidence": existing.evidence + list(new_evidence or []),
                "counter_evidence": existing.counter_evidence + list(new_counter_evidence or []),
                "updated_at": now,
            }
        )

    scratchpad.hypotheses[position] = hypothesis
    _touch(scratchpad)
    return hypothesis


def set_synthesis(scratchpad: Scratchpad, synthesis: Synthesis) -> None:
    """Set the final synthesis, replacing any previous one."""
    scratchpad.synthesis = synthesis
    _touch(scratchpad)


# ============================================================================
# Views
# ============================================================================


def summarize(scratchpad: Scratchpad) -> str:
    """Render the scratchpad as text. This is what the agent "sees" of its state."""
    lines: list[str] = [
        f"=== SCRATCHPAD: {scratchpad.market_question} ===",
        f"Market ID: {scratchpad.market_id}",
        f"Last updated: {scratchpad.updated_at.isoformat()}",
        "",
    ]

    for title, items in (
        ("FACTS", scratchpad.facts),
        ("SIGNALS", scratchpad.signals),
        ("UNCERTAINTIES", scratchpad.uncertainties),
    ):
        if items:
            lines.append(f"{title} ({len(items)}):")
            lines.extend(f"  • {item}" for item in items)
            lines.append("")

    if scratchpad.sources:
        lines.append(f"SOURCES CONSULTED ({len(scratchpad.sources)}):")
        for source in scratchpad.sources:
            lines.append(f"  • [{source.type}] {source.query or source.url or 'N/A'}")
        lines.append("")

    if scratchpad.hypotheses:
        lines.append("HYPOTHESES:")
        for hypothesis in scratchpad.hypotheses.values():
            lines.append(
                f"  {hypothesis.position.upper()} ({hypothesis.confidence:g}% confidence): "
                f"{hypothesis.thesis}"
            )
            for item in hypothesis.evidence:
                lines.append(f"    + {item}")
            for item in hypothesis.counter_evidence:
                lines.append(f"    - {item}")
        lines.append("")

    if scratchpad.notes:
        recent = scratchpad.notes[-RECENT_NOTES_SHOWN:]
        lines.append(f"RECENT NOTES ({len(recent)} of {len(scratchpad.notes)}):")
        lines.extend(f"  {note}" for note in recent)
        lines.append("")

    if scratchpad.synthesis:
        synthesis = scratchpad.synthesis
        lines.append("SYNTHESIS (COMPLETE):")
        lines.append(f"  Position: {synthesis.recommended_position.upper()}")
        lines.append(f"  Confidence: {synthesis.confidence}")
        lines.append(f"  Thesis: {synthesis.thesis}")
    else:
        lines.append("SYNTHESIS: Not yet complete")

    return "\n".join(lines)


def export_for_agent(scratchpad: Scratchpad) -> dict:
    """Compact counts-only view of the scratchpad."""
    return {
        "market_id": scratchpad.market_id,
        "market_question": scratchpad.market_question,
        "fact_count": len(scratchpad.facts),
        "signal_count": len(scratchpad.signals),
        "uncertainty_count": len(scratchpad.uncertainties),
        "note_count": len(scratchpad.notes),
        "sources_consulted": len(scratchpad.sources),
        "hypotheses": [
            {
                "position": h.position,
                "confidence": h.confidence,
                "evidence_count": len(h.evidence),
                "counter_evidence_count": len(h.counter_evidence),
            }
            for h in scratchpad.hypotheses.values()
        ],
        "has_synthesis": scratchpad.synthesis is not None,
        "last_updated": scratchpad.updated_at.isoformat(),
    }


# ============================================================================
# Persistence
# ============================================================================


def safe_market_id(market_id: str) -> str:
    """Market id reduced to characters that are safe in a single file name."""
    return "".join(c if c.isalnum() or c in "-_." else "_" for c in market_id)


def get_scratchpad_path(directory: Path, market_id: str) -> Path:
    return directory / f"{safe_market_id(market_id)}.json"


def load_scratchpad(
    market_id: str,
    market_question: str,
    directory: Path | None = None,
) -> Scratchpad:
    """Load the scratchpad for a market, or create a fresh one.

    Without a directory (or without a saved file) a new, empty scratchpad is
    returned. A saved file that cannot be parsed is logged and replaced by a
    fresh scratchpad.
    """
    if directory is not None:
        path = get_scratchpad_path(directory, market_id)
        if path.exists():
            try:
                scratchpad = Scratchpad.model_validate_json(path.read_text(encoding="utf-8"))
                logger.info(f"Loaded scratchpad for {market_id} from {path}")
                return scratchpad
            except ValueError as e:
                logger.warning(f"Ignoring unreadable scratchpad {path}: {e}")

    return Scratchpad(market_id=market_id, market_question=market_question)


def _atomic_write(path: Path, content: str) -> None:
    """Write content to file atomically using tempfile + move."""
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", dir=path.parent, delete=False, suffix=".json", encoding="utf-8"
        ) as temp_file:
            temp_file.write(content)
            temp_path = Path(temp_file.name)
        shutil.move(str(temp_path), str(path))
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


def save_scratchpad(scratchpad: Scratchpad, directory: Path) -> Path:
    """Persist the scratchpad as JSON. Returns the file path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = get_scratchpad_path(directory, scratchpad.market_id)
    _atomic_write(path, scratchpad.model_dump_json(indent=2))
    logger.info(f"Saved scratchpad for {scratchpad.market_id} to {path}")
    return path
