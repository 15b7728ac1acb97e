from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings

from voice_memo.errors import InvalidInputError
from voice_memo.pipeline_config import (
    FocusArea,
    SummarizerBackend,
    SummaryOptions,
    SummaryStyle,
)

DEFAULT_TASK_KEYWORDS = [
    "todo",
    "task",
    "action item",
    "need to",
    "have to",
    "must",
    "remember to",
    "don't forget",
]


class AnalysisSettings(BaseModel):
    """Task and key-point extraction options."""

    extract_tasks: bool = True
    extract_key_points: bool = True
    include_task_context: bool = True
    include_task_priority: bool = True
    include_task_dates: bool = True
    task_keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_TASK_KEYWORDS))


class IncludeSections(BaseModel):
    """Which summary subsections are extracted and rendered."""

    topics: bool = True
    decisions: bool = True
    questions: bool = True


class SummarizationSettings(BaseModel):
    """Chunked summarization options."""

    enabled: bool = True
    style: SummaryStyle = SummaryStyle.CONCISE
    max_length: int = Field(default=500, gt=0)
    include_sections: IncludeSections = Field(default_factory=IncludeSections)
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    max_workers: int = Field(default=4, gt=0)
    backend: SummarizerBackend = SummarizerBackend.STUB

    @model_validator(mode="after")
    def _overlap_below_chunk_size(self) -> SummarizationSettings:
        if self.chunk_overlap >= self.chunk_size:
            msg = (
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
            raise ValueError(msg)
        return self


class QueueSettings(BaseModel):
    """Job queue limits."""

    max_backlog: int = Field(default=10, gt=0)


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file. Nested
    options use ``__`` as delimiter, e.g. ``SUMMARIZATION__CHUNK_SIZE=800``.
    """

    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    summarization: SummarizationSettings = Field(default_factory=SummarizationSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)

    # Model-backed summarizer (optional)
    anthropic_api_key: str = ""
    llm_model: str = "claude-sonnet-4-20250514"

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    def summary_options(self) -> SummaryOptions:
        """Build the per-call options handed to chunk summarizers."""
        sections = self.summarization.include_sections
        focus = {
            FocusArea.TOPICS: sections.topics,
            FocusArea.DECISIONS: sections.decisions,
            FocusArea.QUESTIONS: sections.questions,
        }
        return SummaryOptions(
            max_length=self.summarization.max_length,
            style=self.summarization.style,
            focus_areas=frozenset(area for area, on in focus.items() if on),
        )


def load_settings(**overrides: Any) -> Settings:
    """Build Settings, reporting validation problems as InvalidInputError."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid configuration: {exc}", original_error=exc) from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return load_settings()
    except InvalidInputError:
        raise
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return load_settings(_env_file=None)
