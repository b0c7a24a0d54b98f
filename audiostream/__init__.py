"""Audio chunk ingestion with a staged async pipeline, in-memory and JSON-lines storage, and HTTP/WebSocket endpoints."""

__version__ = "0.1.0"