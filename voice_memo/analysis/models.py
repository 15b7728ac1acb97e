"""Data models for transcript analysis results."""

from __future__ import annotations

from dataclasses import dataclass, field

from voice_memo.pipeline_config import Priority


@dataclass(frozen=True)
class ExtractedTask:
    """A single actionable phrase found in a transcript."""

    text: str
    priority: Priority = Priority.NONE
    due_date: str | None = None  # raw phrase, e.g. "tomorrow" or "next Friday"
    tags: tuple[str, ...] = ()
    context: str = ""


@dataclass
class AnalysisResult:
    """Tasks and key points extracted from one transcript."""

    tasks: list[ExtractedTask] = field(default_factory=list)
    key_points: list[str] = field(default_factory=list)
