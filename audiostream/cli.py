"""Command-line entry point that serves the HTTP and WebSocket API."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from collections.abc import Callable, Sequence
from typing import Any

from aiohttp import web

from audiostream.api import create_app
from audiostream.disk import DiskStore
from audiostream.memory import MemoryStore
from audiostream.models import Store
from audiostream.processor import Processor

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8081
DEFAULT_DB = "data.db"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="audiostream", description="Serve the audio chunk ingestion API."
    )
    parser.add_argument("--host", default=None, help="address to bind (default: all)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument("--db", default=DEFAULT_DB, help="file that stored chunks are appended to")
    return parser.parse_args(argv)


async def _serve(
    mem_store: Store,
    disk_store: Store,
    host: str | None,
    port: int,
    stop: asyncio.Event,
    on_ready: Callable[[list[Any]], None] | None = None,
) -> None:
    async with Processor(mem_store, disk_store) as processor:
        runner = web.AppRunner(create_app(processor))
        await runner.setup()
        try:
            site = web.TCPSite(runner, host, port)
            await site.start()
            logger.info("Server starting at %s:%d", host or "", port)
            if on_ready is not None:
                on_ready(list(runner.addresses))
            await stop.wait()
            logger.info("Shutting down server...")
        finally:
            await runner.cleanup()


async def _run(mem_store: Store, disk_store: Store, host: str | None, port: int) -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            pass
    await _serve(mem_store, disk_store, host, port, stop)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server until interrupted; return the process exit status."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    mem_store = MemoryStore()
    try:
        disk_store = DiskStore(args.db)
    except OSError as exc:
        logger.error("failed to initialize disk store: %s", exc)
        return 1

    try:
        asyncio.run(_run(mem_store, disk_store, args.host, args.port))
    except KeyboardInterrupt:
        logger.info("Shutting down server...")
    except OSError as exc:
        logger.error("server error: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())