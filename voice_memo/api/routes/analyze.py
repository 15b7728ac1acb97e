"""Analyze endpoint: synchronous extraction and summarization of one transcript."""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from voice_memo.analysis.extractor import analyze
from voice_memo.api.dependencies import get_service
from voice_memo.api.models import AnalyzeRequest, AnalyzeResponse, SummaryResponse, TaskResponse
from voice_memo.errors import SummarizationUnavailableError
from voice_memo.service import AnalysisService
from voice_memo.summarization.merger import summarize

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze_transcript(
    request: AnalyzeRequest,
    service: Annotated[AnalysisService, Depends(get_service)],
) -> AnalyzeResponse:
    """Extract tasks and key points and, if requested, summarize the transcript.

    A summarization failure is reported in ``warnings`` instead of failing the
    request, matching how queued jobs treat it.
    """
    settings = service.settings
    result = await asyncio.to_thread(analyze, request.transcript, settings.analysis)

    summary: SummaryResponse | None = None
    warnings: list[str] = []
    if request.summarize and settings.summarization.enabled:
        cfg = settings.summarization
        try:
            merged = await asyncio.to_thread(
                summarize,
                request.transcript,
                settings.summary_options(),
                service.summarizer,
                chunk_size=cfg.chunk_size,
                chunk_overlap=cfg.chunk_overlap,
                max_workers=cfg.max_workers,
            )
        except SummarizationUnavailableError as exc:
            logger.warning("Summary unavailable: %s", exc)
            warnings.append(exc.describe())
        else:
            summary = SummaryResponse(
                summary=merged.summary,
                topics=merged.topics,
                decisions=merged.decisions,
                questions=merged.questions,
            )

    return AnalyzeResponse(
        tasks=[
            TaskResponse(
                text=t.text,
                priority=t.priority,
                due_date=t.due_date,
                tags=list(t.tags),
                context=t.context,
            )
            for t in result.tasks
        ],
        key_points=result.key_points,
        summary=summary,
        warnings=warnings,
    )
