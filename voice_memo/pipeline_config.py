"""Pipeline configuration: analysis enums and the SummaryOptions dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from voice_memo.errors import InvalidInputError


class SummaryStyle(StrEnum):
    """Rendering styles understood by chunk summarizers."""

    CONCISE = "concise"
    DETAILED = "detailed"
    BULLET_POINTS = "bullet-points"


class FocusArea(StrEnum):
    """Whole-transcript extractions that accompany the narrative summary."""

    TOPICS = "topics"
    DECISIONS = "decisions"
    QUESTIONS = "questions"


class Priority(StrEnum):
    """Inferred urgency of an extracted task."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class JobStatus(StrEnum):
    """Lifecycle of an analysis job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class SummarizerBackend(StrEnum):
    """Available chunk summarizer implementations."""

    STUB = "stub"
    CLAUDE = "claude"


@dataclass(frozen=True)
class SummaryOptions:
    """Immutable options passed to every chunk summarization call.

    ``max_length`` is a soft cap in characters; summarizers may use it as
    guidance rather than a hard limit.
    """

    max_length: int = 500
    style: SummaryStyle = SummaryStyle.CONCISE
    focus_areas: frozenset[FocusArea] = field(
        default_factory=lambda: frozenset(FocusArea),
    )

    def __post_init__(self) -> None:
        if isinstance(self.max_length, bool) or not isinstance(self.max_length, int):
            raise InvalidInputError(f"max_length must be an integer, got {self.max_length!r}")
        if self.max_length <= 0:
            raise InvalidInputError(f"max_length must be positive, got {self.max_length}")
        try:
            style = SummaryStyle(self.style)
            areas = frozenset(FocusArea(a) for a in self.focus_areas)
        except ValueError as exc:
            raise InvalidInputError(str(exc), original_error=exc) from exc
        # Normalise plain strings to enums on the frozen instance.
        object.__setattr__(self, "style", style)
        object.__setattr__(self, "focus_areas", areas)
