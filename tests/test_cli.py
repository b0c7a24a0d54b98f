import asyncio
import json

import aiohttp
import pytest

from audiostream.cli import _parse_args, _serve, main
from audiostream.disk import DiskStore
from audiostream.memory import MemoryStore
from audiostream.models import ChunkNotFoundError


def test_defaults_match_server_settings():
    args = _parse_args([])
    assert args.port == 8081
    assert args.db == "data.db"
    assert args.host is None


def test_options_are_parsed():
    args = _parse_args(["--host", "127.0.0.1", "--port", "9000", "--db", "x.db"])
    assert (args.host, args.port, args.db) == ("127.0.0.1", 9000, "x.db")


def test_bad_port_is_usage_error():
    with pytest.raises(SystemExit) as info:
        main(["--port", "abc"])
    assert info.value.code == 2


def test_help_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--help"])
    assert info.value.code == 0
    assert "--db" in capsys.readouterr().out


def test_unusable_db_path_fails(tmp_path):
    missing = tmp_path / "missing" / "data.db"
    assert main(["--db", str(missing)]) == 1
    assert not missing.exists()


async def _wait_for_chunk(store, chunk_id, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        try:
            return store.get_by_id(chunk_id)
        except ChunkNotFoundError:
            if loop.time() > deadline:
                raise
            await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_server_serves_and_persists_until_stopped(tmp_path):
    db = tmp_path / "data.db"
    mem = MemoryStore()
    disk = DiskStore(db)
    stop = asyncio.Event()
    ready = asyncio.Event()
    addresses = []

    def on_ready(addrs):
        addresses.extend(addrs)
        ready.set()

    task = asyncio.create_task(_serve(mem, disk, "127.0.0.1", 0, stop, on_ready))
    await asyncio.wait_for(ready.wait(), timeout=5)
    host, port = addresses[0][:2]
    base = f"http://{host}:{port}"

    async with aiohttp.ClientSession() as session:
        async with session.get(f"{base}/sessions/nobody") as resp:
            assert resp.status == 200
            assert await resp.json() == []
        headers = {"userId": "carol", "sessionId": "s9", "timeStamp": "7"}
        async with session.post(f"{base}/upload", data=b"sound", headers=headers) as resp:
            assert resp.status == 202
            chunk_id = (await resp.json())["ID"]
        await _wait_for_chunk(mem, chunk_id)

    stop.set()
    await asyncio.wait_for(task, timeout=5)
    assert task.done() and task.exception() is None

    lines = db.read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["ID"] for r in records] == [chunk_id]
    assert records[0]["UserID"] == "carol"