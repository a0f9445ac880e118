#!/usr/bin/env python3
"""Live microphone transcription through the relay server.

Usage: python -m src.scripts.transcribe --server http://localhost:8000 --language en
"""

from __future__ import annotations

import sys
import asyncio
import argparse
import contextlib

from src.errors import DeviceUnavailable
from src.audio import AudioCapture
from src.config.broker import DEFAULT_LANGUAGE
from src.runtime.logging import configure_logging
from src.client import BrokerClient, ClientSessionManager


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream microphone audio to the transcription relay")
    p.add_argument("--server", default="http://localhost:8000", help="relay server base URL")
    p.add_argument("--language", default=DEFAULT_LANGUAGE)
    p.add_argument("--show-volume", action="store_true", help="print the input level meter")
    return p.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    broker = BrokerClient(args.server)
    manager = ClientSessionManager(
        broker,
        language=args.language,
        on_transcript=lambda text: print(f"\r{text}", end="", flush=True),
        on_status=lambda status: print(f"\n[status] {status}", file=sys.stderr),
        on_error=lambda message: print(f"\n[error] {message}", file=sys.stderr),
    )
    on_volume = None
    if args.show_volume:
        on_volume = lambda level: print(f"\r[volume] {'#' * int(level / 5):<20}", end="", file=sys.stderr)  # noqa: E731
    capture = AudioCapture(manager.send_audio, on_volume=on_volume)

    try:
        if not await manager.initialize():
            return 1
        try:
            await capture.start()
        except DeviceUnavailable as exc:
            print(f"[error] {exc}", file=sys.stderr)
            return 1
        print("[status] Recording... press Ctrl+C to stop", file=sys.stderr)
        await asyncio.Event().wait()
    finally:
        await capture.close()
        await manager.disconnect()
        await broker.aclose()
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = parse_args(argv)
    with contextlib.suppress(KeyboardInterrupt):
        return asyncio.run(run(args))
    print("", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
