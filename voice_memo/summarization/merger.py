"""Chunk-then-merge summarization plus whole-transcript topic/decision/question extraction."""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor

from voice_memo.analysis.extractor import split_sentences
from voice_memo.analysis.patterns import DECISION_PATTERNS, QUESTION_OPENER, TOPIC_PATTERNS
from voice_memo.errors import SummarizationUnavailableError
from voice_memo.pipeline_config import FocusArea, SummaryOptions
from voice_memo.summarization.chunking import chunk_text
from voice_memo.summarization.models import Chunk, SummaryResult
from voice_memo.summarization.summarizers import ChunkSummarizer, FirstSentenceSummarizer

logger = logging.getLogger(__name__)


def summarize(
    transcript: str,
    options: SummaryOptions | None = None,
    summarizer: ChunkSummarizer | None = None,
    *,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    max_workers: int = 4,
) -> SummaryResult:
    """Summarize *transcript* chunk by chunk and merge the results.

    Chunk summaries are produced concurrently and joined in chunk order,
    separated by blank lines. Topics, decisions and questions are extracted
    once from the whole transcript (never per chunk) for each requested focus
    area.

    Args:
        transcript: Raw transcript text.
        options: Style, length and focus areas; defaults to all focus areas.
        summarizer: Chunk summarizer; defaults to :class:`FirstSentenceSummarizer`.
        chunk_size: Chunk window size in characters.
        chunk_overlap: Characters shared between consecutive chunks.
        max_workers: Upper bound on concurrent chunk summarizations.

    Returns:
        A :class:`SummaryResult`. A blank transcript gives an empty summary.

    Raises:
        SummarizationUnavailableError: If any chunk fails to summarize. No
            partial summary is returned.
        InvalidInputError: If the chunk parameters are out of range.
    """
    options = options or SummaryOptions()
    summarizer = summarizer or FirstSentenceSummarizer()

    chunks = [c for c in chunk_text(transcript, chunk_size, chunk_overlap) if c.text.strip()]
    summaries = _summarize_chunks(chunks, options, summarizer, max_workers)
    combined = combine_chunk_summaries(summaries)
    if chunks and not combined:
        raise SummarizationUnavailableError("Chunk summarizer returned no text")

    areas = options.focus_areas
    return SummaryResult(
        summary=combined,
        topics=extract_topics(transcript) if FocusArea.TOPICS in areas else [],
        decisions=extract_decisions(transcript) if FocusArea.DECISIONS in areas else [],
        questions=extract_questions(transcript) if FocusArea.QUESTIONS in areas else [],
    )


def _summarize_chunks(
    chunks: list[Chunk],
    options: SummaryOptions,
    summarizer: ChunkSummarizer,
    max_workers: int,
) -> list[str]:
    if not chunks:
        return []

    def _one(chunk: Chunk) -> str:
        try:
            return summarizer.summarize_chunk(chunk.text, options)
        except Exception as exc:
            msg = f"Failed to summarize chunk {chunk.chunk_index}: {exc}"
            raise SummarizationUnavailableError(msg, original_error=exc) from exc

    logger.debug("Summarizing %d chunks with %d workers", len(chunks), max_workers)
    with ThreadPoolExecutor(max_workers=min(max_workers, len(chunks))) as pool:
        # map() yields in submission order and re-raises the first failure.
        return list(pool.map(_one, chunks))


def combine_chunk_summaries(summaries: list[str]) -> str:
    """Join chunk summaries in chunk order, separated by blank lines."""
    return "\n\n".join(s.strip() for s in summaries if s and s.strip())


def _collect(text: str, patterns: list[re.Pattern[str]]) -> list[str]:
    found: dict[str, None] = {}
    for pattern in patterns:
        for match in pattern.finditer(text):
            item = match.group(1).strip()
            if item:
                found.setdefault(item, None)
    return list(found)


def extract_topics(text: str) -> list[str]:
    """Phrases of up to four words following discussed/regarding/about/topic:."""
    return _collect(text, TOPIC_PATTERNS)


def extract_decisions(text: str) -> list[str]:
    """Clauses following decided to/decision:/agreed to/conclusion:."""
    return _collect(text, DECISION_PATTERNS)


def extract_questions(text: str) -> list[str]:
    """Sentences ending in ``?`` or opening with a wh-word or "how"."""
    found: dict[str, None] = {}
    for sentence in split_sentences(text):
        if sentence.endswith("?") or QUESTION_OPENER.match(sentence):
            found.setdefault(sentence, None)
    return list(found)
