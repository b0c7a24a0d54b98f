# audiostream

A small asynchronous service that accepts chunks of audio over HTTP or a
WebSocket, passes each one through a staged pipeline (ingest, validation,
transformation, metadata extraction, storage) and keeps the results in memory
and in an append-only JSON-lines file on disk. It is built on aiohttp.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
audiostream
```

Options:

| Option         | Default    | Meaning                                        |
|----------------|------------|------------------------------------------------|
| `--host HOST`  | all        | address to bind                                |
| `--port PORT`  | `8081`     | port to listen on                              |
| `--db FILE`    | `data.db`  | file that stored chunks are appended to        |

The file given by `--db` is created if it does not exist, and every stored
chunk is appended to it as one JSON object per line. If the file cannot be
created the command logs the error and exits with status 1; a failure to
bind the port also exits with status 1. Stop the server with Ctrl+C or
SIGTERM.

## Endpoints

| Method | Path                   | Purpose                                   |
|--------|------------------------|-------------------------------------------|
| POST   | `/upload`              | Submit a chunk; body is the raw audio     |
| GET    | `/chunks/{id}`         | Fetch a stored chunk by its id            |
| GET    | `/sessions/{user_id}`  | List every stored chunk of a user         |
| GET    | `/ws`                  | WebSocket; each message becomes a chunk   |

`POST /upload` needs the headers `userId`, `sessionId` and `timeStamp`
(a 64-bit signed integer). A missing header or a bad timestamp gives `400`;
when the ingestion queue is full the answer is `429`; otherwise `202` with the
chunk as JSON. The chunk gets a fresh UUID as its id.

Chunks are returned as JSON objects with the keys `ID`, `UserID`,
`SessionID`, `Timestamp`, `Data` (the audio, base64 encoded) and `Metadata`.
`GET /chunks/{id}` answers `404` with `chunk not found` for an unknown id;
`GET /sessions/{user_id}` answers an empty list for an unknown user.

Over the WebSocket every text or binary message is accepted as a chunk for
user `ws_user` in session `ws_session`, stamped with the current Unix time,
and answered in the same message type with `chunk accepted: <id>`, or with
`backpressure: queue full` when the pipeline cannot take more. WebSocket
chunks are given their id only later, during validation, so the id in the
acknowledgement is empty.

## The pipeline

`Processor` runs one ingest worker, five workers each for validation,
transformation and metadata extraction, and one storage worker, linked by
queues of `max_queue_size` entries (100 by default). `submit` never waits: it
raises `BackpressureError` when the ingestion queue is full.

- Validation gives a chunk without an id a fresh UUID and drops chunks that
  have no user id, no session id or no data.
- Transformation sets the metadata `checksum` and `transformed_at`.
- Metadata extraction sets `fake_transcript` and `extracted_at`.
- Storage saves the chunk to the memory store and then the disk store; a
  failure of either is logged and does not stop the worker.

The timestamps are RFC 3339 in local time, to the second.

## Using it from Python

```python
import asyncio

from audiostream.api import create_app
from audiostream.disk import DiskStore
from audiostream.memory import MemoryStore
from audiostream.models import AudioChunk
from audiostream.processor import BackpressureError, Processor


async def run() -> None:
    memory = MemoryStore()
    async with Processor(memory, DiskStore("data.db"), 100) as processor:
        chunk = AudioChunk(id="c1", user_id="alice", session_id="s1",
                           timestamp=1, data=b"\x00\x01")
        try:
            processor.submit(chunk)
        except BackpressureError:
            print("queue full, try again later")
        await asyncio.sleep(0.1)
        print(memory.get_by_user("alice"))
        app = create_app(processor)  # an aiohttp web.Application


asyncio.run(run())
```

`Processor` must be started inside a running event loop, either with
`async with` or with `start()` and `await stop()`. The handlers
`upload_handler`, `get_chunk_handler`, `get_session_handler` (in
`audiostream.api`) and `ws_handler` (in `audiostream.wshandler`) can also be
mounted on an application of your own.

`MemoryStore` and `DiskStore` both follow the `Store` interface:
`save`, `get_by_id`, `get_by_user` and `get_by_session`. `MemoryStore` is
thread-safe and returns chunks in the order they were first saved. A lookup
by id that finds nothing raises `ChunkNotFoundError`.

## What it does not do

- The disk store only writes. It raises `ChunkNotFoundError` for every
  lookup, and nothing reads the file back, so the HTTP endpoints only see
  chunks stored since the server started.
- The `checksum` and `fake_transcript` metadata are fixed placeholder values
  (`deadbeef` and `Hello World`); no audio is analysed or transcribed.
- Chunks still queued in the pipeline when the server stops are discarded.
- There is no authentication, and the WebSocket accepts any origin.