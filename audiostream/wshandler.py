"""WebSocket endpoint that turns every incoming message into an audio chunk."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable

from aiohttp import WSMsgType, web

from audiostream.models import AudioChunk
from audiostream.processor import BackpressureError, Processor

logger = logging.getLogger(__name__)

WS_USER_ID = "ws_user"
WS_SESSION_ID = "ws_session"


def parse_ws_message(message: bytes | str) -> AudioChunk:
    """Wrap a raw WebSocket payload in a chunk owned by the WebSocket user."""
    data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
    return AudioChunk(
        id="",
        user_id=WS_USER_ID,
        session_id=WS_SESSION_ID,
        timestamp=int(time.time()),
        data=data,
    )


def ws_handler(
    processor: Processor,
) -> Callable[[web.Request], Awaitable[web.StreamResponse]]:
    """Build a handler that submits each WebSocket message to the processor."""

    async def handle(request: web.Request) -> web.StreamResponse:
        ws = web.WebSocketResponse()
        if not ws.can_prepare(request).ok:
            logger.warning("ws upgrade error: request is not a websocket handshake")
            return web.Response(text="Bad Request\n", status=400)
        await ws.prepare(request)

        async for msg in ws:
            if msg.type is WSMsgType.ERROR:
                logger.warning("ws read error: %s", ws.exception())
                break
            if msg.type not in (WSMsgType.TEXT, WSMsgType.BINARY):
                continue

            chunk = parse_ws_message(msg.data)
            try:
                processor.submit(chunk)
            except BackpressureError:
                await ws.send_str("backpressure: queue full")
                continue

            ack = "chunk accepted: " + chunk.id
            try:
                if msg.type is WSMsgType.TEXT:
                    await ws.send_str(ack)
                else:
                    await ws.send_bytes(ack.encode("utf-8"))
            except ConnectionError:
                break

        return ws

    return handle