"""In-memory chunk store indexed by id, user and session."""

from __future__ import annotations

import threading

from audiostream.models import AudioChunk, ChunkNotFoundError, Store


class MemoryStore(Store):
    """Thread-safe store keeping chunks in dictionaries."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._chunks: dict[str, AudioChunk] = {}
        # Dicts with None values serve as insertion-ordered sets of ids.
        self._user_index: dict[str, dict[str, None]] = {}
        self._session_index: dict[str, dict[str, None]] = {}

    def save(self, chunk: AudioChunk) -> None:
        with self._lock:
            self._chunks[chunk.id] = chunk
            self._user_index.setdefault(chunk.user_id, {})[chunk.id] = None
            self._session_index.setdefault(chunk.session_id, {})[chunk.id] = None

    def get_by_id(self, chunk_id: str) -> AudioChunk:
        with self._lock:
            try:
                return self._chunks[chunk_id]
            except KeyError:
                raise ChunkNotFoundError() from None

    def get_by_user(self, user_id: str) -> list[AudioChunk]:
        with self._lock:
            return self._collect(self._user_index.get(user_id, {}))

    def get_by_session(self, session_id: str) -> list[AudioChunk]:
        with self._lock:
            return self._collect(self._session_index.get(session_id, {}))

    def _collect(self, ids: dict[str, None]) -> list[AudioChunk]:
        return [self._chunks[i] for i in ids if i in self._chunks]