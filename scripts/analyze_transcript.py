"""Turn a transcript text file into a voice memo note and print or save it."""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from voice_memo.config import load_settings
from voice_memo.errors import VoiceMemoError
from voice_memo.pipeline_config import SummarizerBackend, SummaryStyle
from voice_memo.service import AnalysisService, JobEvent


def main() -> int:
    parser = argparse.ArgumentParser(description="Analyze a voice memo transcript")
    parser.add_argument("transcript", type=Path, help="Plain-text transcript file")
    parser.add_argument("--output", "-o", type=Path, help="Write the note here instead of stdout")
    parser.add_argument("--no-summary", action="store_true", help="Skip summarization")
    parser.add_argument(
        "--style",
        choices=[s.value for s in SummaryStyle],
        default=SummaryStyle.CONCISE.value,
    )
    parser.add_argument(
        "--backend",
        choices=[b.value for b in SummarizerBackend],
        default=SummarizerBackend.STUB.value,
    )
    parser.add_argument("--chunk-size", type=int, default=1000)
    parser.add_argument("--chunk-overlap", type=int, default=200)
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.transcript.exists():
        print(f"Error: {args.transcript} not found")
        return 1

    try:
        settings = load_settings(
            summarization={
                "enabled": not args.no_summary,
                "style": args.style,
                "backend": args.backend,
                "chunk_size": args.chunk_size,
                "chunk_overlap": args.chunk_overlap,
            }
        )
    except VoiceMemoError as exc:
        print(f"Error: {exc.describe()}")
        return 1

    notes: list[str] = []

    def on_event(event: JobEvent) -> None:
        if event.message and event.kind != "progress":
            print(f"[{event.kind}] {event.message}", file=sys.stderr)

    service = AnalysisService(
        lambda _job_id, markdown: notes.append(markdown),
        settings,
        notifier=on_event,
    )
    service.submit(args.transcript.read_text(encoding="utf-8"))
    job = service.process_next()

    if job is None or not notes:
        return 1

    if args.output:
        args.output.write_text(notes[0], encoding="utf-8")
        print(f"Saved note to {args.output}")
    else:
        print(notes[0], end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
