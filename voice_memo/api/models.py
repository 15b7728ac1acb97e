"""Pydantic request/response schemas for the Voice Memo API."""

from __future__ import annotations

from pydantic import BaseModel

from voice_memo.errors import ErrorCode
from voice_memo.pipeline_config import JobStatus, Priority


class AnalyzeRequest(BaseModel):
    """Request body for the /api/analyze endpoint."""

    transcript: str
    summarize: bool = True


class TaskResponse(BaseModel):
    """A single extracted task."""

    text: str
    priority: Priority = Priority.NONE
    due_date: str | None = None
    tags: list[str] = []
    context: str = ""


class SummaryResponse(BaseModel):
    """Merged summary with whole-transcript extractions."""

    summary: str
    topics: list[str] = []
    decisions: list[str] = []
    questions: list[str] = []


class AnalyzeResponse(BaseModel):
    """Response body for the /api/analyze endpoint."""

    tasks: list[TaskResponse]
    key_points: list[str]
    summary: SummaryResponse | None = None
    warnings: list[str] = []


class JobRequest(BaseModel):
    """Request body for the /api/jobs endpoint."""

    transcript: str


class JobSubmitResponse(BaseModel):
    """Response body after a job is queued."""

    job_id: str
    status: JobStatus


class JobStatusResponse(BaseModel):
    """Current state of a queued or finished job."""

    job_id: str
    status: JobStatus
    error: str | None = None
    error_code: ErrorCode | None = None
    warnings: list[str] = []
    has_summary: bool = False


class ErrorResponse(BaseModel):
    """Body returned for handled pipeline errors."""

    error: str
    code: ErrorCode
