import pytest

from audiostream.memory import MemoryStore
from audiostream.models import AudioChunk, ChunkNotFoundError


def make_chunk(chunk_id, user="u1", session="s1"):
    return AudioChunk(id=chunk_id, user_id=user, session_id=session, timestamp=1, data=b"x")


def test_save_and_get_by_id():
    store = MemoryStore()
    chunk = make_chunk("a")
    store.save(chunk)
    assert store.get_by_id("a") is chunk


def test_missing_id_raises():
    store = MemoryStore()
    with pytest.raises(ChunkNotFoundError):
        store.get_by_id("missing")


def test_get_by_user_returns_all_of_user():
    store = MemoryStore()
    store.save(make_chunk("a", user="u1"))
    store.save(make_chunk("b", user="u1"))
    store.save(make_chunk("c", user="u2"))
    assert sorted(c.id for c in store.get_by_user("u1")) == ["a", "b"]
    assert [c.id for c in store.get_by_user("u2")] == ["c"]


def test_get_by_session_returns_all_of_session():
    store = MemoryStore()
    store.save(make_chunk("a", session="s1"))
    store.save(make_chunk("b", session="s2"))
    store.save(make_chunk("c", session="s1"))
    assert sorted(c.id for c in store.get_by_session("s1")) == ["a", "c"]


def test_unknown_user_and_session_give_empty_list():
    store = MemoryStore()
    assert store.get_by_user("nobody") == []
    assert store.get_by_session("none") == []


def test_resaving_same_id_replaces_without_duplicates():
    store = MemoryStore()
    store.save(make_chunk("a"))
    replacement = make_chunk("a")
    replacement.data = b"new"
    store.save(replacement)
    chunks = store.get_by_user("u1")
    assert len(chunks) == 1
    assert chunks[0].data == b"new"
    assert store.get_by_id("a") is replacement