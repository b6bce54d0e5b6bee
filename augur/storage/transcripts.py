"""Write-only transcript of a research run, for audit.

The research loop records every turn here; nothing in the loop ever reads it
back.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from augur.storage.scratchpad import safe_market_id

logger = logging.getLogger(__name__)

DIVIDER = "─" * 60


class TranscriptEntry(BaseModel):
    """One logged block of the conversation."""

    role: str
    content: str
    at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TranscriptRecorder:
    """Collects transcript entries in order and renders them as markdown."""

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []

    @property
    def entries(self) -> list[TranscriptEntry]:
        return list(self._entries)

    def record(self, role: str, content: str) -> None:
        self._entries.append(TranscriptEntry(role=role, content=content))

    def render(self, header: str = "") -> str:
        blocks = [header] if header else []
        for entry in self._entries:
            blocks.append(
                f"\n{DIVIDER}\n[{entry.at.strftime('%H:%M:%S')}] {entry.role}\n{DIVIDER}\n\n"
                f"{entry.content}\n"
            )
        return "".join(blocks)

    def save(self, directory: Path, market_id: str, header: str = "") -> Path:
        """Write the rendered transcript to ``<directory>/<safe market id>_<timestamp>.md``."""
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        path = directory / f"{safe_market_id(market_id)}_{stamp}.md"
        path.write_text(self.render(header), encoding="utf-8")
        logger.info(f"Saved transcript to {path}")
        return path
