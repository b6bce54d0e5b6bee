"""Storage for research scratchpads and run transcripts."""

from augur.storage.scratchpad import (
    Hypothesis,
    Position,
    Scratchpad,
    SourceRecord,
    Synthesis,
    add_fact,
    add_signal,
    add_uncertainty,
    append_note,
    export_for_agent,
    load_scratchpad,
    record_source,
    save_scratchpad,
    set_synthesis,
    summarize,
    update_hypothesis,
)
from augur.storage.transcripts import TranscriptEntry, TranscriptRecorder

__all__ = [
    "Hypothesis",
    "Position",
    "Scratchpad",
    "SourceRecord",
    "Synthesis",
    "add_fact",
    "add_signal",
    "add_uncertainty",
    "append_note",
    "export_for_agent",
    "load_scratchpad",
    "record_source",
    "save_scratchpad",
    "set_synthesis",
    "summarize",
    "update_hypothesis",
    "TranscriptEntry",
    "TranscriptRecorder",
]
