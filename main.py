"""
Command-line entry point: parse a hotel quote from a local file and/or text.

Usage:
    python main.py --file proposal.pdf
    python main.py --text "Group rate $189, 20 rooms, 3 nights..."
    python main.py --file offer.html --text "See the attached offer"
"""

import argparse
import asyncio
import json
import mimetypes
import sys
import threading
import time
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from config.config import Config
from models.errors import QuoteParserError
from models.quote import FileRef, InputDocument
from orchestrator.factory import create_orchestrator_from_env


def show_loading_animation(stop_event: threading.Event) -> None:
    """
    Show a loading animation on stderr so stdout stays valid JSON.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stderr.write(f'\r\033[93mParsing {char}\033[0m')
            sys.stderr.flush()
            time.sleep(0.1)

    sys.stderr.write('\r' + ' ' * 20 + '\r')
    sys.stderr.flush()


def guess_media_type(path: Path) -> str:
    media_type, _ = mimetypes.guess_type(path.name)
    return media_type or "application/octet-stream"


def run(text: str, file_path: Path | None) -> dict:
    orchestrator = create_orchestrator_from_env(Config())

    if file_path is None:
        return asyncio.run(orchestrator.process(InputDocument(source_text=text))).to_dict()

    with open(file_path, 'rb') as stream:
        file_ref = FileRef(
            filename=file_path.name,
            media_type=guess_media_type(file_path),
            size=file_path.stat().st_size,
            stream=stream,
        )
        document = InputDocument(source_text=text, uploaded_file=file_ref)
        return asyncio.run(orchestrator.process(document)).to_dict()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extract hotel quote totals")
    parser.add_argument("--text", default="", help="Pasted quote or email text")
    parser.add_argument("--file", type=Path, help="PDF, HTML or plain-text quote file")
    args = parser.parse_args(argv)

    if args.file is not None and not args.file.is_file():
        print(f"Error: file not found: {args.file}", file=sys.stderr)
        return 2

    stop_animation = threading.Event()
    loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation,))
    loading_thread.daemon = True
    loading_thread.start()

    try:
        payload = run(args.text, args.file)
    except QuoteParserError as e:
        stop_animation.set()
        loading_thread.join()
        print(json.dumps({"error": e.message, "details": e.details}, indent=2, default=str))
        return 1
    stop_animation.set()
    loading_thread.join()

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
