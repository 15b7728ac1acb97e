"""Data models for the chunked summarization pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Chunk:
    """A window of the transcript handed to a chunk summarizer.

    ``text`` is always ``transcript[start_offset:end_offset]``; consecutive
    chunks may overlap.
    """

    text: str
    start_offset: int
    end_offset: int
    chunk_index: int = 0


@dataclass
class SummaryResult:
    """Merged chunk summaries plus whole-transcript topics, decisions and questions."""

    summary: str
    topics: list[str] = field(default_factory=list)
    decisions: list[str] = field(default_factory=list)
    questions: list[str] = field(default_factory=list)
