"""Core data model and the storage interface shared by all stores."""

from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class AudioChunk:
    """A piece of audio belonging to a user's session."""

    id: str = ""
    user_id: str = ""
    session_id: str = ""
    timestamp: int = 0
    data: bytes = b""
    metadata: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping; the audio bytes are base64 encoded."""
        return {
            "ID": self.id,
            "UserID": self.user_id,
            "SessionID": self.session_id,
            "Timestamp": self.timestamp,
            "Data": base64.b64encode(self.data).decode("ascii"),
            "Metadata": dict(self.metadata) if self.metadata is not None else None,
        }


class ChunkNotFoundError(LookupError):
    """Raised when a requested chunk is not in a store."""

    def __init__(self, message: str = "chunk not found") -> None:
        super().__init__(message)


class Store(ABC):
    """Interface every chunk store implements."""

    @abstractmethod
    def save(self, chunk: AudioChunk) -> None:
        """Persist a chunk."""

    @abstractmethod
    def get_by_id(self, chunk_id: str) -> AudioChunk:
        """Return the chunk with this id or raise ChunkNotFoundError."""

    @abstractmethod
    def get_by_user(self, user_id: str) -> list[AudioChunk]:
        """Return all chunks of a user."""

    @abstractmethod
    def get_by_session(self, session_id: str) -> list[AudioChunk]:
        """Return all chunks of a session."""