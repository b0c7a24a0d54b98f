"""HTTP handlers and the application that routes requests to them."""

from __future__ import annotations

import json
import re
import sys
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from aiohttp import web

from audiostream.models import AudioChunk, ChunkNotFoundError
from audiostream.processor import BackpressureError, Processor
from audiostream.wshandler import ws_handler

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _error(message: str, status: int) -> web.Response:
    return web.Response(text=message + "\n", status=status)


def _json(payload: Any, status: int = 200) -> web.Response:
    return web.Response(
        text=json.dumps(payload, ensure_ascii=False) + "\n",
        status=status,
        content_type="application/json",
    )


def _parse_timestamp(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid timestamp: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"timestamp out of range: {text!r}")
    return value


def upload_handler(processor: Processor) -> Handler:
    """Accept a raw audio body described by userId, sessionId and timeStamp headers."""

    async def handle(request: web.Request) -> web.Response:
        user_id = request.headers.get("userId", "")
        session_id = request.headers.get("sessionId", "")
        timestamp_text = request.headers.get("timeStamp", "")
        if not user_id or not session_id or not timestamp_text:
            return _error("missing required headers", 400)

        try:
            timestamp = _parse_timestamp(timestamp_text)
        except ValueError:
            return _error("invalid timestamp", 400)

        try:
            data = await request.read()
        except OSError:
            return _error("failed to read body", 500)

        chunk = AudioChunk(
            id=str(uuid.uuid4()),
            user_id=user_id,
            session_id=session_id,
            timestamp=timestamp,
            data=data,
        )
        try:
            processor.submit(chunk)
        except BackpressureError:
            return _error("backpressure: ingestion queue full", 429)

        return _json(chunk.to_dict(), status=202)

    return handle


def get_chunk_handler(processor: Processor) -> Handler:
    """Return one stored chunk by its id."""

    async def handle(request: web.Request) -> web.Response:
        try:
            chunk = processor.mem_store.get_by_id(request.match_info["id"])
        except ChunkNotFoundError:
            return _error("chunk not found", 404)
        return _json(chunk.to_dict())

    return handle


def get_session_handler(processor: Processor) -> Handler:
    """Return every stored chunk of a user."""

    async def handle(request: web.Request) -> web.Response:
        try:
            chunks = processor.mem_store.get_by_user(request.match_info["user_id"])
        except Exception:
            return _error("failed to get sessions", 500)
        return _json([chunk.to_dict() for chunk in chunks])

    return handle


def create_app(processor: Processor) -> web.Application:
    """Build the web application with all routes bound to the processor."""
    app = web.Application(client_max_size=sys.maxsize)
    app.router.add_post("/upload", upload_handler(processor))
    app.router.add_get("/chunks/{id}", get_chunk_handler(processor), allow_head=False)
    app.router.add_get(
        "/sessions/{user_id}", get_session_handler(processor), allow_head=False
    )
    app.router.add_route("*", "/ws", ws_handler(processor))
    return app