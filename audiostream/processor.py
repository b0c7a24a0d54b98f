"""Asynchronous multi-stage pipeline that validates, enriches and stores chunks."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from audiostream.models import AudioChunk, Store

logger = logging.getLogger(__name__)

DEFAULT_MAX_QUEUE_SIZE = 100
WORKERS_PER_STAGE = 5


class BackpressureError(RuntimeError):
    """Raised when the ingestion queue has no room for another chunk."""

    def __init__(self, message: str = "backpressure: ingestion queue full") -> None:
        super().__init__(message)


def _rfc3339_now() -> str:
    stamp = datetime.now().astimezone().isoformat(timespec="seconds")
    return stamp[:-6] + "Z" if stamp.endswith("+00:00") else stamp


class Processor:
    """Moves chunks through ingest, validation, transformation, metadata and storage."""

    def __init__(
        self,
        mem_store: Store,
        disk_store: Store,
        max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE,
    ) -> None:
        self.mem_store = mem_store
        self.disk_store = disk_store
        self.max_queue_size = max_queue_size
        self._ingest_q: asyncio.Queue[AudioChunk] = asyncio.Queue(max_queue_size)
        self._validate_q: asyncio.Queue[AudioChunk] = asyncio.Queue(max_queue_size)
        self._transform_q: asyncio.Queue[AudioChunk] = asyncio.Queue(max_queue_size)
        self._metadata_q: asyncio.Queue[AudioChunk] = asyncio.Queue(max_queue_size)
        self._storage_q: asyncio.Queue[AudioChunk] = asyncio.Queue(max_queue_size)
        self._tasks: list[asyncio.Task[None]] = []

    def start(self) -> None:
        """Launch the worker tasks on the running event loop."""
        if self._tasks:
            raise RuntimeError("processor already started")
        coros = [self._run_stage(self._ingest_q, self._validate_q, lambda c: c)]
        for source, sink, step in (
            (self._validate_q, self._transform_q, self._validate),
            (self._transform_q, self._metadata_q, self._transform),
            (self._metadata_q, self._storage_q, self._extract_metadata),
        ):
            coros.extend(self._run_stage(source, sink, step) for _ in range(WORKERS_PER_STAGE))
        coros.append(self._store_chunks())
        self._tasks = [asyncio.create_task(coro) for coro in coros]

    async def stop(self) -> None:
        """Cancel all workers and wait for them to finish."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def submit(self, chunk: AudioChunk) -> None:
        """Queue a chunk for processing without waiting."""
        try:
            self._ingest_q.put_nowait(chunk)
        except asyncio.QueueFull:
            raise BackpressureError() from None

    async def __aenter__(self) -> Processor:
        self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.stop()

    async def _run_stage(
        self,
        source: asyncio.Queue[AudioChunk],
        sink: asyncio.Queue[AudioChunk],
        step: Callable[[AudioChunk], AudioChunk | None],
    ) -> None:
        while True:
            chunk = await source.get()
            result = step(chunk)
            if result is not None:
                await sink.put(result)

    async def _store_chunks(self) -> None:
        while True:
            chunk = await self._storage_q.get()
            for store in (self.mem_store, self.disk_store):
                try:
                    store.save(chunk)
                except Exception:
                    logger.exception("failed to save chunk %s", chunk.id)

    @staticmethod
    def _validate(chunk: AudioChunk) -> AudioChunk | None:
        if not chunk.id:
            chunk.id = str(uuid.uuid4())
        if not chunk.user_id or not chunk.session_id or not chunk.data:
            return None
        return chunk

    @staticmethod
    def _transform(chunk: AudioChunk) -> AudioChunk:
        if chunk.metadata is None:
            chunk.metadata = {}
        chunk.metadata["checksum"] = "deadbeef"
        chunk.metadata["transformed_at"] = _rfc3339_now()
        return chunk

    @staticmethod
    def _extract_metadata(chunk: AudioChunk) -> AudioChunk:
        if chunk.metadata is None:
            chunk.metadata = {}
        chunk.metadata["fake_transcript"] = "Hello World"
        chunk.metadata["extracted_at"] = _rfc3339_now()
        return chunk