"""Shared service instances for the API, overridable in tests."""

from __future__ import annotations

import threading
from functools import lru_cache

from voice_memo.config import get_settings
from voice_memo.service import AnalysisService


class NoteStore:
    """In-memory persistence for finished notes, keyed by job ID."""

    def __init__(self) -> None:
        self._notes: dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, job_id: str, markdown: str) -> None:
        with self._lock:
            self._notes[job_id] = markdown

    def get(self, job_id: str) -> str | None:
        with self._lock:
            return self._notes.get(job_id)


@lru_cache(maxsize=1)
def get_note_store() -> NoteStore:
    return NoteStore()


@lru_cache(maxsize=1)
def get_service() -> AnalysisService:
    return AnalysisService(get_note_store().save, get_settings())
