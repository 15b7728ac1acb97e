"""Error taxonomy shared by the analysis pipeline, the job service and the API."""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable codes surfaced alongside human-readable messages."""

    INVALID_INPUT = "INVALID_INPUT"
    QUEUE_FULL = "QUEUE_FULL"
    SUMMARIZATION_UNAVAILABLE = "SUMMARIZATION_UNAVAILABLE"
    FORMATTING_FAILED = "FORMATTING_FAILED"
    UPSTREAM_TRANSCRIPTION_FAILED = "UPSTREAM_TRANSCRIPTION_FAILED"
    NOTE_CREATION_FAILED = "NOTE_CREATION_FAILED"
    UNKNOWN = "UNKNOWN"


class VoiceMemoError(Exception):
    """Base class for every error raised deliberately by this package."""

    default_code = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.original_error = original_error

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Return ``"<CODE>: <message>"`` as recorded on failed jobs."""
        return f"{self.code}: {self.message}"


class InvalidInputError(VoiceMemoError):
    """Malformed options or job input; raised before any processing starts."""

    default_code = ErrorCode.INVALID_INPUT


class QueueFullError(VoiceMemoError):
    """The job backlog has reached its configured limit."""

    default_code = ErrorCode.QUEUE_FULL


class SummarizationUnavailableError(VoiceMemoError):
    """Chunk summarization failed; callers downgrade this to a warning."""

    default_code = ErrorCode.SUMMARIZATION_UNAVAILABLE


class FormattingFailedError(VoiceMemoError):
    """The note could not be rendered; fatal to the job."""

    default_code = ErrorCode.FORMATTING_FAILED


class UpstreamTranscriptionFailedError(VoiceMemoError):
    """The transcript source raised instead of returning text."""

    default_code = ErrorCode.UPSTREAM_TRANSCRIPTION_FAILED


class NoteCreationFailedError(VoiceMemoError):
    """The persistence collaborator rejected the finished note."""

    default_code = ErrorCode.NOTE_CREATION_FAILED
