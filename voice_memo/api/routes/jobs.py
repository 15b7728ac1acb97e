"""Job endpoints: queue transcripts and fetch status and finished notes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from voice_memo.api.dependencies import NoteStore, get_note_store, get_service
from voice_memo.api.models import JobRequest, JobStatusResponse, JobSubmitResponse
from voice_memo.pipeline_config import JobStatus
from voice_memo.service import AnalysisService

router = APIRouter()


@router.post("/api/jobs", response_model=JobSubmitResponse, status_code=202)
async def submit_job(
    request: JobRequest,
    background_tasks: BackgroundTasks,
    service: Annotated[AnalysisService, Depends(get_service)],
) -> JobSubmitResponse:
    """Queue a transcript for analysis; the queue is drained in the background."""
    job_id = service.submit(request.transcript)
    # Sync callables run in the threadpool; the service serialises jobs itself.
    background_tasks.add_task(service.run_pending)
    return JobSubmitResponse(job_id=job_id, status=JobStatus.PENDING)


@router.get("/api/jobs/{job_id}", response_model=JobStatusResponse)
async def get_job(
    job_id: str,
    service: Annotated[AnalysisService, Depends(get_service)],
) -> JobStatusResponse:
    job = service.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobStatusResponse(
        job_id=job.id,
        status=job.status,
        error=job.error,
        error_code=job.error_code,
        warnings=list(job.warnings),
        has_summary=job.has_summary,
    )


@router.get("/api/jobs/{job_id}/note", response_class=PlainTextResponse)
async def get_job_note(
    job_id: str,
    store: Annotated[NoteStore, Depends(get_note_store)],
) -> str:
    """Return the markdown note saved for a completed job."""
    note = store.get(job_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return note
