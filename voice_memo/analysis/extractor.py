"""Pattern-based extraction of tasks and key points from a transcript."""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from voice_memo.analysis.models import AnalysisResult, ExtractedTask
from voice_memo.analysis.patterns import (
    CONTEXT_WINDOW,
    DUE_DATE_PATTERN,
    KEY_POINT_INDICATORS,
    PRIORITY_TIERS,
    SENTENCE_PATTERN,
    TAG_PATTERN,
    TaskPattern,
    build_task_patterns,
)
from voice_memo.config import AnalysisSettings
from voice_memo.pipeline_config import Priority

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def _task_table(task_keywords: tuple[str, ...] | None) -> list[TaskPattern]:
    return build_task_patterns(task_keywords)


def analyze(transcript: str, settings: AnalysisSettings | None = None) -> AnalysisResult:
    """Extract tasks and key points from *transcript*.

    Args:
        transcript: Raw transcript text. An empty string yields empty results.
        settings: Analysis options; only ``task_keywords`` affects extraction.

    Returns:
        An :class:`AnalysisResult` with tasks in transcript order and key
        points in sentence order.
    """
    if not transcript:
        return AnalysisResult()

    keywords = tuple(settings.task_keywords) if settings is not None else None
    tasks = extract_tasks(transcript, _task_table(keywords))
    key_points = extract_key_points(transcript)
    logger.debug("Extracted %d tasks and %d key points", len(tasks), len(key_points))
    return AnalysisResult(tasks=tasks, key_points=key_points)


def extract_tasks(text: str, patterns: list[TaskPattern]) -> list[ExtractedTask]:
    """Apply the task table to *text* and enrich each unique match.

    Matches from all patterns are visited in transcript order (pattern order
    breaks ties at the same offset). A task whose normalised text was already
    seen is dropped, whichever pattern found it.
    """
    candidates: list[tuple[int, int, re.Match[str]]] = []
    for rank, row in enumerate(patterns):
        for match in row.pattern.finditer(text):
            candidates.append((match.start(), rank, match))
    candidates.sort(key=lambda c: (c[0], c[1]))

    tasks: list[ExtractedTask] = []
    seen: set[str] = set()
    for start, _, match in candidates:
        task_text = match.group(1).strip()
        key = task_text.lower()
        if not task_text or key in seen:
            continue
        seen.add(key)

        span = match.group(0)
        tasks.append(
            ExtractedTask(
                text=task_text,
                priority=detect_priority(span),
                due_date=extract_due_date(span),
                tags=extract_tags(task_text),
                context=extract_context(text, start),
            )
        )
    return tasks


def detect_priority(span: str) -> Priority:
    """Classify escalation words in *span*; the first matching tier wins."""
    for priority, pattern in PRIORITY_TIERS:
        if pattern.search(span):
            return priority
    return Priority.NONE


def extract_due_date(span: str) -> str | None:
    """Return the raw date phrase found in *span*, without normalisation."""
    match = DUE_DATE_PATTERN.search(span)
    return match.group(1) if match else None


def extract_tags(task_text: str) -> tuple[str, ...]:
    """Collect ``#hashtag`` and ``@mention`` tokens in order of first appearance."""
    tags: list[str] = []
    for token in TAG_PATTERN.findall(task_text):
        if token not in tags:
            tags.append(token)
    return tuple(tags)


def extract_context(text: str, index: int, window: int = CONTEXT_WINDOW) -> str:
    """Return up to *window* characters either side of *index*, stripped."""
    start = max(0, index - window)
    end = min(len(text), index + window)
    return text[start:end].strip()


def split_sentences(text: str) -> list[str]:
    """Split on ``.``, ``!``, ``?`` and newlines, dropping blank fragments."""
    sentences = (s.strip() for s in SENTENCE_PATTERN.findall(text))
    return [s for s in sentences if s]


def extract_key_points(text: str) -> list[str]:
    """Return sentences containing a key-point indicator phrase, in order."""
    return [
        sentence
        for sentence in split_sentences(text)
        if any(p.search(sentence) for p in KEY_POINT_INDICATORS)
    ]


def format_tasks(tasks: list[ExtractedTask], settings: AnalysisSettings | None = None) -> list[str]:
    """Render tasks as Obsidian checkbox lines, one task per entry.

    Priority and due date are appended as bracketed suffixes, followed by the
    task's tags. With ``include_task_context`` the surrounding transcript
    excerpt is added as an indented sub-line of the same entry.
    """
    settings = settings or AnalysisSettings()
    lines: list[str] = []
    for task in tasks:
        parts = [f"- [ ] {task.text}"]
        if settings.include_task_priority and task.priority is not Priority.NONE:
            parts.append(f"[Priority: {task.priority}]")
        if settings.include_task_dates and task.due_date:
            parts.append(f"[Due: {task.due_date}]")
        if task.tags:
            parts.append(" ".join(task.tags))
        line = " ".join(parts)
        if settings.include_task_context and task.context:
            line += f"\n    - Context: {' '.join(task.context.split())}"
        lines.append(line)
    return lines
