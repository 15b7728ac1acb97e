"""Chunk summarizers: one chunk of text in, one summary string out.

``FirstSentenceSummarizer`` is the dependency-free reference implementation.
``ClaudeChunkSummarizer`` calls the Anthropic Messages API and can be swapped
in without touching the merger.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol

from anthropic import Anthropic
from anthropic.types import TextBlock

from voice_memo.errors import SummarizationUnavailableError
from voice_memo.pipeline_config import SummarizerBackend, SummaryOptions, SummaryStyle

if TYPE_CHECKING:
    from voice_memo.config import Settings

_SENTENCE_END = re.compile(r"(?:[.!?](?=\s|$)|\n)\s*")


class ChunkSummarizer(Protocol):
    """Anything that can summarize a single chunk of transcript."""

    def summarize_chunk(self, chunk: str, options: SummaryOptions) -> str: ...


def _truncate(text: str, max_length: int) -> str:
    """Cut *text* to *max_length* characters on a word boundary, adding an ellipsis."""
    if len(text) <= max_length:
        return text
    cut = text[: max_length - 1].rsplit(" ", 1)[0].rstrip(" ,;:")
    return (cut or text[: max_length - 1]) + "…"


def _leading_sentences(text: str, count: int) -> str:
    end = 0
    for _ in range(count):
        match = _SENTENCE_END.search(text, end)
        if match is None:
            return text
        end = match.end()
    return text[:end].strip()


class FirstSentenceSummarizer:
    """Reference summarizer returning the chunk's opening sentence verbatim.

    ``detailed`` keeps the first two sentences and ``bullet-points`` renders
    the result as a markdown bullet.
    """

    def summarize_chunk(self, chunk: str, options: SummaryOptions) -> str:
        text = chunk.strip()
        if not text:
            return ""
        count = 2 if options.style is SummaryStyle.DETAILED else 1
        summary = _truncate(_leading_sentences(text, count), options.max_length)
        if options.style is SummaryStyle.BULLET_POINTS:
            return f"- {summary}"
        return summary


_STYLE_INSTRUCTIONS = {
    SummaryStyle.CONCISE: "Write one or two plain sentences.",
    SummaryStyle.DETAILED: "Write a short paragraph covering every substantive point.",
    SummaryStyle.BULLET_POINTS: "Write a markdown bullet list, one bullet per point.",
}


class ClaudeChunkSummarizer:
    """Summarize chunks with Claude, one Messages API call per chunk."""

    def __init__(self, api_key: str, model: str, client: Anthropic | None = None) -> None:
        self.model = model
        self.client = client or Anthropic(api_key=api_key)

    def summarize_chunk(self, chunk: str, options: SummaryOptions) -> str:
        response = self.client.messages.create(
            model=self.model,
            # Rough chars-to-tokens conversion for the soft length cap.
            max_tokens=max(64, options.max_length // 3),
            system=(
                "You summarize excerpts of a spoken voice memo transcript.\n\n"
                "Rules:\n"
                "- Only use information present in the excerpt.\n"
                f"- Keep the summary under {options.max_length} characters.\n"
                f"- {_STYLE_INSTRUCTIONS[options.style]}"
            ),
            messages=[
                {
                    "role": "user",
                    "content": f"Summarize this transcript excerpt:\n\n{chunk}",
                }
            ],
        )

        block = response.content[0] if response.content else None
        if not isinstance(block, TextBlock):
            kind = type(block).__name__ if block is not None else "empty response"
            raise SummarizationUnavailableError(f"Expected TextBlock from Claude, got {kind}")
        return block.text.strip()


def build_summarizer(settings: Settings) -> ChunkSummarizer:
    """Return the chunk summarizer selected by ``summarization.backend``."""
    if settings.summarization.backend is SummarizerBackend.CLAUDE:
        return ClaudeChunkSummarizer(settings.anthropic_api_key, settings.llm_model)
    return FirstSentenceSummarizer()
