"""Markdown rendering of analysis and summary results into a voice memo note."""

from __future__ import annotations

import re
from datetime import datetime

from voice_memo.analysis.extractor import format_tasks
from voice_memo.analysis.models import AnalysisResult
from voice_memo.config import Settings
from voice_memo.errors import FormattingFailedError
from voice_memo.summarization.models import SummaryResult

NOTE_TITLE = "# Voice Memo Transcription"
EMPTY_SUMMARY = "_No summary available._"


def _escape_headings(text: str) -> str:
    """Keep transcript lines from being read as markdown headings."""
    return re.sub(r"^(\s*)#", r"\1\\#", text, flags=re.MULTILINE)


def _bullets(heading: str, items: list[str]) -> list[str]:
    return [heading, *(f"- {item}" for item in items), ""]


def format_summary(result: SummaryResult, settings: Settings | None = None) -> str:
    """Render the ``## Summary`` block with its non-empty, enabled subsections."""
    sections = (settings or Settings()).summarization.include_sections
    parts = ["## Summary", "", _escape_headings(result.summary.strip()) or EMPTY_SUMMARY, ""]

    if sections.topics and result.topics:
        parts += _bullets("### Topics Discussed", result.topics)
    if sections.decisions and result.decisions:
        parts += _bullets("### Decisions Made", result.decisions)
    if sections.questions and result.questions:
        parts += _bullets("### Questions Raised", result.questions)

    return "\n".join(parts)


def format_note(
    transcript: str,
    analysis: AnalysisResult,
    summary: SummaryResult | None,
    *,
    created_at: datetime,
    settings: Settings | None = None,
) -> str:
    """Render the complete note handed to the persistence layer.

    Section order: front matter, title, summary and full transcription (or
    the bare transcript when *summary* is ``None``), tasks, key points. Any
    section whose source list is empty or disabled is left out entirely.

    Raises:
        FormattingFailedError: If the note cannot be rendered.
    """
    if not isinstance(created_at, datetime):
        raise FormattingFailedError(f"created_at must be a datetime, got {type(created_at).__name__}")
    settings = settings or Settings()
    analysis_cfg = settings.analysis

    try:
        parts = [
            "---",
            "type: voice-memo",
            f"created: {created_at.isoformat()}",
            "---",
            "",
            NOTE_TITLE,
            "",
        ]

        if summary is not None:
            parts += [format_summary(summary, settings).rstrip("\n"), "", "## Full Transcription", ""]
        parts.append(_escape_headings(transcript.strip()))

        if analysis_cfg.extract_tasks and analysis.tasks:
            parts += ["", "## Tasks", "", *format_tasks(analysis.tasks, analysis_cfg)]

        if analysis_cfg.extract_key_points and analysis.key_points:
            parts += ["", "## Key Points", "", *(f"- {point}" for point in analysis.key_points)]
    except (AttributeError, TypeError) as exc:
        raise FormattingFailedError(f"Failed to format note: {exc}", original_error=exc) from exc

    return "\n".join(parts) + "\n"
