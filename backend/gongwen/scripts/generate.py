"""Command-line generation against a running server.

Usage:
    python -m gongwen.scripts.generate "关于召开年度工作会议的通知要点……" --mode 公文生成模式 --docx out/

Process:
1. Stream the generation, printing answer deltas to stdout as they arrive
2. Optionally print reasoning deltas to stderr
3. Optionally export the final answer to a .docx file
"""

import argparse
import asyncio
import sys
from pathlib import Path

from gongwen.client import GongwenClient
from gongwen.core import GongwenError
from gongwen.models import AUTO, GenerationMode, StreamEvent, StreamEventType


def make_printer(show_reasoning: bool):
    """Build the per-event callback."""

    def _print(event: StreamEvent) -> None:
        if event.type == StreamEventType.CONTENT:
            sys.stdout.write(event.delta)
            sys.stdout.flush()
        elif show_reasoning:
            sys.stderr.write(event.delta)
            sys.stderr.flush()

    return _print


async def run(
    base_url: str,
    text: str,
    mode: str,
    doc_type: str,
    show_reasoning: bool,
    docx_dir: Path | None,
) -> bool:
    """Run one generation (and export); returns True on success."""
    async with GongwenClient(base_url) as client:
        try:
            consumer = await client.stream_generate(
                text, mode=mode, doc_type=doc_type, on_event=make_printer(show_reasoning)
            )
        except GongwenError as e:
            print(f"\nGeneration failed: {e.message}", file=sys.stderr)
            return False

        print()
        if consumer.interrupted:
            print("Stream ended early; output is partial", file=sys.stderr)

        if docx_dir is None or not consumer.content_text:
            return not consumer.interrupted

        try:
            name, data = await client.export_docx(consumer.content_text)
        except GongwenError as e:
            print(f"Export failed: {e.message}", file=sys.stderr)
            return False

    docx_dir.mkdir(parents=True, exist_ok=True)
    target = docx_dir / name
    target.write_bytes(data)
    print(f"Saved {target}", file=sys.stderr)
    return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate an official document via a gongwen server")
    parser.add_argument("text", help="Raw input text; '-' reads stdin")
    parser.add_argument(
        "--base-url",
        type=str,
        default="http://localhost:3000",
        help="Server base URL",
    )
    parser.add_argument(
        "--mode",
        type=str,
        default=AUTO,
        help=f"Generation mode hint: {GenerationMode.QA.value} or {GenerationMode.DOCUMENT.value}",
    )
    parser.add_argument("--doc-type", type=str, default=AUTO, help="Document type hint, e.g. 通知")
    parser.add_argument(
        "--show-reasoning",
        action="store_true",
        help="Print reasoning deltas to stderr",
    )
    parser.add_argument(
        "--docx",
        type=Path,
        default=None,
        help="Directory to save the exported .docx into",
    )

    args = parser.parse_args()
    text = sys.stdin.read() if args.text == "-" else args.text

    success = asyncio.run(
        run(
            base_url=args.base_url,
            text=text,
            mode=args.mode,
            doc_type=args.doc_type,
            show_reasoning=args.show_reasoning,
            docx_dir=args.docx,
        )
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
