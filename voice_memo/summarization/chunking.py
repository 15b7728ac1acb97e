"""Sentence-aware, overlapping character windows over a transcript."""

from __future__ import annotations

from voice_memo.errors import InvalidInputError
from voice_memo.summarization.models import Chunk

# How far back from a window's nominal end to look for a sentence-ending period.
BOUNDARY_LOOKBACK = 50


def chunk_text(text: str, size: int = 1000, overlap: int = 200) -> list[Chunk]:
    """Split *text* into overlapping windows of roughly *size* characters.

    When a window does not reach the end of the text, the last period within
    the final ``BOUNDARY_LOOKBACK`` characters becomes the breakpoint, so
    chunks tend to end on a sentence. The next window starts *overlap*
    characters before that breakpoint.

    Args:
        text: Transcript to split.
        size: Nominal window length in characters (``> 0``).
        overlap: Characters shared with the previous window (``0 <= overlap < size``).

    Returns:
        Chunks in order; together they cover ``[0, len(text))`` without gaps.

    Raises:
        InvalidInputError: If *size* or *overlap* are out of range.
    """
    if size <= 0:
        raise InvalidInputError(f"chunk size must be positive, got {size}")
    if not 0 <= overlap < size:
        raise InvalidInputError(f"chunk overlap must be in [0, {size}), got {overlap}")
    if not text:
        return []

    chunks: list[Chunk] = []
    start = 0
    length = len(text)

    while start < length:
        end = min(start + size, length)
        breakpoint_ = end
        if end < length:
            search_from = max(start + 1, end - BOUNDARY_LOOKBACK)
            period = text.rfind(".", search_from, end)
            if period != -1:
                breakpoint_ = period + 1

        chunks.append(
            Chunk(
                text=text[start:breakpoint_],
                start_offset=start,
                end_offset=breakpoint_,
                chunk_index=len(chunks),
            )
        )

        if breakpoint_ >= length:
            break
        next_start = max(breakpoint_ - overlap, 0)
        # Guarantee progress when the overlap would rewind to (or past) this start.
        if next_start <= start:
            next_start = start + 1
        start = next_start

    return chunks
