"""Pattern library: ordered, data-driven matching rules for transcript analysis.

Every rule here is plain data. The extractor and the summary merger iterate
over these tables, so vocabulary can be changed without touching control flow.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from voice_memo.pipeline_config import Priority

# A captured phrase runs up to and including the next sentence terminator
# (or the end of the transcript). It never starts on whitespace or punctuation.
_PHRASE = r"([^\s.,;:!?][^.!?\n]*(?:[.!?\n]|$))"

_WEEKDAYS = r"monday|tuesday|wednesday|thursday|friday|saturday|sunday"
_MONTHS = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)


@dataclass(frozen=True)
class TaskPattern:
    """One row of the task table: a category and a pattern capturing the task phrase."""

    category: str
    pattern: re.Pattern[str]


def _compile(expr: str) -> re.Pattern[str]:
    return re.compile(expr, re.IGNORECASE)


def _alternation(phrases: Iterable[str]) -> str:
    # Longest first so "action item" wins over "action".
    escaped = sorted({re.escape(p) for p in phrases}, key=lambda p: (-len(p), p))
    return "|".join(escaped).replace("'", "['’]").replace(r"\ ", r"\s+")


# ---------------------------------------------------------------------------
# Task vocabulary
# ---------------------------------------------------------------------------

PRIORITY_MARKERS = ["high priority", "urgent", "asap"]
EXPLICIT_MARKERS = ["todo", "to-do", "task", "action item"]
OBLIGATION_PHRASES = ["need to", "have to", "must"]
REMINDER_PHRASES = ["remember to", "don't forget to"]
DELEGATION_PHRASES = ["assigned to", "delegate to"]
DEADLINE_CUES = r"(?:" + _WEEKDAYS + r"|tomorrow|next\s+week)"

# Keywords that already belong to a fixed category and never become obligation phrases.
_RESERVED_KEYWORDS = {
    *PRIORITY_MARKERS,
    *EXPLICIT_MARKERS,
    *REMINDER_PHRASES,
    "don't forget",
    *DELEGATION_PHRASES,
}


def obligation_vocabulary(task_keywords: Iterable[str] | None) -> list[str]:
    """Resolve the obligation phrases for a configured keyword list.

    Keywords that belong to another category are ignored. When nothing is left
    the built-in obligation phrases are used.
    """
    if task_keywords is None:
        return list(OBLIGATION_PHRASES)
    vocab: list[str] = []
    for raw in task_keywords:
        keyword = " ".join(raw.lower().split())
        if keyword and keyword not in _RESERVED_KEYWORDS and keyword not in vocab:
            vocab.append(keyword)
    return vocab or list(OBLIGATION_PHRASES)


def build_task_patterns(task_keywords: Iterable[str] | None = None) -> list[TaskPattern]:
    """Return the ordered task table for the given obligation vocabulary."""
    obligations = _alternation(obligation_vocabulary(task_keywords))
    return [
        TaskPattern(
            "priority",
            _compile(r"\b(?:" + _alternation(PRIORITY_MARKERS) + r")\b:?\s*" + _PHRASE),
        ),
        TaskPattern(
            "marker",
            _compile(r"\b(?:" + _alternation(EXPLICIT_MARKERS) + r")\b:?\s*" + _PHRASE),
        ),
        TaskPattern(
            "obligation",
            _compile(r"\b(?:" + obligations + r")\b\s+" + _PHRASE),
        ),
        TaskPattern(
            "reminder",
            _compile(r"\b(?:" + _alternation(REMINDER_PHRASES) + r")\s+" + _PHRASE),
        ),
        TaskPattern(
            "deadline",
            _compile(r"\b(?:by|before|due)\s+" + DEADLINE_CUES + r"\s*[,:]\s*" + _PHRASE),
        ),
        TaskPattern(
            "delegation",
            _compile(r"\b(?:" + _alternation(DELEGATION_PHRASES) + r")\s+\w+\s*[,:]\s*" + _PHRASE),
        ),
    ]


TASK_PATTERNS: list[TaskPattern] = build_task_patterns()

# ---------------------------------------------------------------------------
# Task enrichment
# ---------------------------------------------------------------------------

# Checked in order; the first tier with a hit wins.
PRIORITY_TIERS: list[tuple[Priority, re.Pattern[str]]] = [
    (Priority.HIGH, _compile(r"\b(?:urgent|asap|high\s+priority|critical|immediately)\b")),
    (Priority.MEDIUM, _compile(r"\b(?:important|soon|medium\s+priority)\b")),
    (Priority.LOW, _compile(r"\b(?:eventually|when\s+possible|low\s+priority)\b")),
]

DUE_DATE_PATTERN = _compile(
    r"(?:\b(?:by|before|due|on)\s+)?\b("
    r"next\s+(?:week|" + _WEEKDAYS + r")"
    r"|" + _WEEKDAYS +
    r"|tomorrow"
    r"|\d{1,2}/\d{1,2}(?:/\d{2,4})?"
    r"|(?:" + _MONTHS + r")\.?\s+\d{1,2}(?:st|nd|rd|th)?(?:,?\s+\d{4})?"
    r")\b"
)

TAG_PATTERN = re.compile(r"(?<![\w@#])[#@][\w-]+")

CONTEXT_WINDOW = 100

# ---------------------------------------------------------------------------
# Sentences, key points, topics, decisions, questions
# ---------------------------------------------------------------------------

SENTENCE_PATTERN = re.compile(r"[^.!?\n]+(?:[.!?\n]+|$)")

KEY_POINT_INDICATORS: list[re.Pattern[str]] = [
    _compile(r"\b(?:key|main|important|significant|notable)\s+points?\b"),
    _compile(r"\b(?:primarily|mainly|essentially|fundamentally)\b"),
    _compile(r"\b(?:in\s+summary|to\s+summari[sz]e|in\s+conclusion)\b"),
    _compile(r"\b(?:highlight\w*|emphasi[sz]\w*|stress(?:ed|es|ing)?)\b"),
    _compile(r"\bnote\s+that\b"),
]

TOPIC_PATTERNS: list[re.Pattern[str]] = [
    _compile(r"\bdiscuss(?:ed)?\s+(\w+(?:\s+\w+){0,3})"),
    _compile(r"\bregarding\s+(\w+(?:\s+\w+){0,3})"),
    _compile(r"\babout\s+(\w+(?:\s+\w+){0,3})"),
    _compile(r"\btopic:\s*(\w+(?:\s+\w+){0,3})"),
]

DECISION_PATTERNS: list[re.Pattern[str]] = [
    _compile(r"\bdecided\s+to\s+" + _PHRASE),
    _compile(r"\bdecision:\s*" + _PHRASE),
    _compile(r"\bagreed\s+to\s+" + _PHRASE),
    _compile(r"\bconclusion:\s*" + _PHRASE),
]

QUESTION_OPENER = _compile(r"^(?:what|who|whom|whose|where|when|why|which|how)\b")
