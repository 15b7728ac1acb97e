"""Analysis job service: a single-consumer FIFO queue around the note pipeline.

Each job moves ``pending -> processing -> completed | failed``. Jobs run one
at a time; summarization failures are downgraded to warnings, every other
failure is fatal to the job. Jobs are never retried.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from voice_memo.analysis.extractor import analyze
from voice_memo.config import Settings, get_settings
from voice_memo.errors import (
    ErrorCode,
    InvalidInputError,
    NoteCreationFailedError,
    QueueFullError,
    SummarizationUnavailableError,
    UpstreamTranscriptionFailedError,
    VoiceMemoError,
)
from voice_memo.notes.formatter import format_note
from voice_memo.pipeline_config import JobStatus, SummaryOptions
from voice_memo.summarization.merger import summarize
from voice_memo.summarization.models import SummaryResult
from voice_memo.summarization.summarizers import ChunkSummarizer, build_summarizer

logger = logging.getLogger(__name__)

TranscriptSource = Callable[[], str]
NoteSink = Callable[[str, str], None]  # (job_id, markdown)


class EventKind(StrEnum):
    """Kinds of notifications emitted for the UI layer."""

    PROGRESS = "progress"
    WARNING = "warning"
    ERROR = "error"
    COMPLETED = "completed"


@dataclass(frozen=True)
class JobEvent:
    """A notification about a job; ``job_id`` is None for rejected submissions."""

    job_id: str | None
    kind: EventKind
    message: str = ""
    progress: int | None = None
    code: ErrorCode | None = None


Notifier = Callable[[JobEvent], None]


@dataclass
class Job:
    """One transcript's trip through extraction, summarization and formatting."""

    id: str
    created_at: datetime
    options: SummaryOptions
    transcript: str | None = None
    source: TranscriptSource | None = None
    status: JobStatus = JobStatus.PENDING
    error: str | None = None
    error_code: ErrorCode | None = None
    warnings: list[str] = field(default_factory=list)
    has_summary: bool = False


def _new_job_id() -> str:
    return f"job-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


class AnalysisService:
    """Queue transcripts and turn each into a markdown note for *note_sink*."""

    def __init__(
        self,
        note_sink: NoteSink,
        settings: Settings | None = None,
        *,
        summarizer: ChunkSummarizer | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.summarizer = summarizer or build_summarizer(self.settings)
        self.note_sink = note_sink
        self.notifier = notifier
        self._queue: deque[Job] = deque()
        self._jobs: dict[str, Job] = {}
        self._lock = threading.Lock()
        self._process_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Submission and inspection
    # ------------------------------------------------------------------

    def submit(
        self,
        transcript: str | None = None,
        *,
        source: TranscriptSource | None = None,
    ) -> str:
        """Enqueue a transcript (or a callable producing one) and return the job ID.

        Raises:
            InvalidInputError: Unless exactly one of *transcript* / *source* is
                given, or when the configured summary options are invalid.
            QueueFullError: When the backlog has reached ``queue.max_backlog``.
        """
        if (transcript is None) == (source is None):
            raise InvalidInputError("Provide exactly one of transcript or source")
        if transcript is not None and not isinstance(transcript, str):
            raise InvalidInputError(f"transcript must be a string, got {type(transcript).__name__}")
        if source is not None and not callable(source):
            raise InvalidInputError("source must be callable")
        options = self.settings.summary_options()

        limit = self.settings.queue.max_backlog
        job = Job(
            id=_new_job_id(),
            created_at=datetime.now(UTC),
            options=options,
            transcript=transcript,
            source=source,
        )
        with self._lock:
            accepted = len(self._queue) < limit
            if accepted:
                self._queue.append(job)
                self._jobs[job.id] = job
                backlog = len(self._queue)

        if not accepted:
            exc = QueueFullError("Analysis queue is full. Please wait for current jobs to complete.")
            self._notify(JobEvent(None, EventKind.ERROR, exc.message, code=exc.code))
            raise exc

        logger.info("Queued job %s (backlog %d)", job.id, backlog)
        return job.id

    @property
    def backlog(self) -> int:
        """Jobs that are pending or currently processing."""
        with self._lock:
            return len(self._queue)

    def get_job(self, job_id: str) -> Job | None:
        with self._lock:
            return self._jobs.get(job_id)

    def get_job_status(self, job_id: str) -> dict[str, object] | None:
        """Return status, error and warnings for *job_id*, or None if unknown."""
        job = self.get_job(job_id)
        if job is None:
            return None
        return {
            "status": job.status,
            "error": job.error,
            "error_code": job.error_code,
            "warnings": list(job.warnings),
            "has_summary": job.has_summary,
        }

    def cleanup(self) -> None:
        """Drop pending jobs and job history. A job already processing finishes."""
        with self._lock:
            running = [j for j in self._queue if j.status is JobStatus.PROCESSING]
            self._queue = deque(running)
            self._jobs = {j.id: j for j in running}

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def process_next(self) -> Job | None:
        """Run the oldest pending job to completion; return it, or None if idle."""
        with self._process_lock:
            with self._lock:
                if not self._queue:
                    return None
                job = self._queue[0]
                job.status = JobStatus.PROCESSING

            try:
                self._run(job)
            finally:
                with self._lock:
                    if self._queue and self._queue[0] is job:
                        self._queue.popleft()
            return job

    def run_pending(self) -> list[Job]:
        """Process queued jobs one at a time until the queue is empty."""
        processed: list[Job] = []
        while (job := self.process_next()) is not None:
            processed.append(job)
        return processed

    def _run(self, job: Job) -> None:
        self._progress(job, 0)
        try:
            transcript = self._resolve_transcript(job)
            self._progress(job, 25)

            analysis = analyze(transcript, self.settings.analysis)
            self._progress(job, 50)

            summary = self._try_summarize(job, transcript)
            job.has_summary = summary is not None
            self._progress(job, 75)

            note = format_note(
                transcript,
                analysis,
                summary,
                created_at=job.created_at,
                settings=self.settings,
            )
            self._deliver(job, note)
        except VoiceMemoError as exc:
            self._fail(job, exc)
        except Exception as exc:
            logger.exception("Unexpected failure in job %s", job.id)
            self._fail(job, VoiceMemoError(str(exc) or type(exc).__name__, original_error=exc))
        else:
            job.status = JobStatus.COMPLETED
            logger.info("Job %s completed", job.id)
            self._progress(job, 100)
            self._notify(JobEvent(job.id, EventKind.COMPLETED, "Analysis completed"))

    def _resolve_transcript(self, job: Job) -> str:
        if job.source is None:
            return job.transcript or ""
        try:
            text = job.source()
        except Exception as exc:
            raise UpstreamTranscriptionFailedError(
                f"Transcription failed: {exc}", original_error=exc
            ) from exc
        if not isinstance(text, str):
            raise UpstreamTranscriptionFailedError(
                f"Transcription returned {type(text).__name__}, expected text"
            )
        return text

    def _try_summarize(self, job: Job, transcript: str) -> SummaryResult | None:
        cfg = self.settings.summarization
        if not cfg.enabled:
            return None
        try:
            return summarize(
                transcript,
                job.options,
                self.summarizer,
                chunk_size=cfg.chunk_size,
                chunk_overlap=cfg.chunk_overlap,
                max_workers=cfg.max_workers,
            )
        except SummarizationUnavailableError as exc:
            logger.warning("Summary unavailable for job %s: %s", job.id, exc)
            warning = exc.describe()
            job.warnings.append(warning)
            self._notify(JobEvent(job.id, EventKind.WARNING, warning, code=exc.code))
            return None

    def _deliver(self, job: Job, note: str) -> None:
        try:
            self.note_sink(job.id, note)
        except Exception as exc:
            raise NoteCreationFailedError(
                f"Failed to save note: {exc}", original_error=exc
            ) from exc

    def _fail(self, job: Job, exc: VoiceMemoError) -> None:
        job.status = JobStatus.FAILED
        job.error_code = exc.code
        job.error = exc.describe()
        logger.error("Job %s failed: %s", job.id, job.error)
        self._notify(JobEvent(job.id, EventKind.ERROR, f"Analysis failed: {job.error}", code=exc.code))

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _progress(self, job: Job, percent: int) -> None:
        self._notify(JobEvent(job.id, EventKind.PROGRESS, progress=percent))

    def _notify(self, event: JobEvent) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier(event)
        except Exception:
            logger.exception("Notifier failed for event %s", event.kind)
