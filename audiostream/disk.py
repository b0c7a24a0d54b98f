"""Append-only store writing chunks to a file as JSON lines."""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path

from audiostream.models import AudioChunk, ChunkNotFoundError, Store


class DiskStore(Store):
    """Writes each saved chunk as one JSON line; lookups are not supported."""

    def __init__(self, filename: str | os.PathLike[str]) -> None:
        self.filename = Path(filename)
        self.filename.touch(exist_ok=True)
        self._lock = threading.Lock()

    def save(self, chunk: AudioChunk) -> None:
        line = json.dumps(chunk.to_dict(), separators=(",", ":")) + "\n"
        with self._lock:
            fd = os.open(self.filename, os.O_APPEND | os.O_WRONLY)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(line)

    def get_by_id(self, chunk_id: str) -> AudioChunk:
        raise ChunkNotFoundError()

    def get_by_user(self, user_id: str) -> list[AudioChunk]:
        raise ChunkNotFoundError()

    def get_by_session(self, session_id: str) -> list[AudioChunk]:
        raise ChunkNotFoundError()