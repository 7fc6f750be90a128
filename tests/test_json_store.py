"""
Tests for the JSON file persistence adapter.
"""

import asyncio
import json
import threading

import pytest

from booking_ledger.core.exceptions import PersistenceError, Timeout
from booking_ledger.infrastructure.json_store import DEFAULT_COLLECTIONS, JsonFileStore


@pytest.fixture
def store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "data" / "db.json", tmp_path / "backups", timeout=5.0)


def read_document(store: JsonFileStore) -> dict:
    with store.path.open(encoding="utf-8") as fh:
        return json.load(fh)


@pytest.mark.asyncio
async def test_missing_file_loads_empty(store):
    collections = await store.load()
    assert collections == {name: [] for name in DEFAULT_COLLECTIONS}
    assert not store.path.exists()


@pytest.mark.asyncio
async def test_corrupt_file_raises(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        await store.load()


@pytest.mark.asyncio
async def test_non_object_document_raises(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text("[]", encoding="utf-8")

    with pytest.raises(PersistenceError):
        await store.load()


@pytest.mark.asyncio
async def test_flush_keeps_other_collections(store):
    """Unknown collections and fields written by other tools survive a flush."""
    store.path.parent.mkdir(parents=True)
    store.path.write_text(json.dumps({
        "users": [{"id": "1", "email": "a@example.com", "nickname": "A"}],
        "bookings": [],
        "reviews": [{"id": "r1", "stars": 5}],
    }), encoding="utf-8")

    await store.load()
    await store.flush({"bookings": [{"id": "b1", "extra": {"nested": True}}]})

    document = read_document(store)
    assert document["reviews"] == [{"id": "r1", "stars": 5}]
    assert document["users"][0]["nickname"] == "A"
    assert document["bookings"] == [{"id": "b1", "extra": {"nested": True}}]
    assert document["favorites"] == []


@pytest.mark.asyncio
async def test_flush_leaves_no_temp_files(store):
    await store.flush({"bookings": [{"id": "b1"}]})
    assert [p.name for p in store.path.parent.iterdir()] == ["db.json"]


@pytest.mark.asyncio
async def test_flush_retries_once_on_os_error(store, monkeypatch):
    calls = []
    original = store._write_atomic

    def flaky(payload, ticket):
        calls.append(1)
        if len(calls) == 1:
            raise OSError("resource temporarily unavailable")
        original(payload, ticket)

    monkeypatch.setattr(store, "_write_atomic", flaky)

    await store.flush({"bookings": [{"id": "b1"}]})
    assert len(calls) == 2
    assert read_document(store)["bookings"] == [{"id": "b1"}]


@pytest.mark.asyncio
async def test_persistent_os_error_raises_and_keeps_file(store, monkeypatch):
    await store.flush({"bookings": [{"id": "b1"}]})
    before = store.path.read_text(encoding="utf-8")

    def broken(payload, ticket):
        raise OSError("disk full")

    monkeypatch.setattr(store, "_write_atomic", broken)

    with pytest.raises(PersistenceError):
        await store.flush({"bookings": [{"id": "b1"}, {"id": "b2"}]})

    assert store.path.read_text(encoding="utf-8") == before

    # The failed document is not remembered as the last known state
    monkeypatch.undo()
    await store.flush({"favorites": [{"id": "f1"}]})
    assert read_document(store)["bookings"] == [{"id": "b1"}]


@pytest.mark.asyncio
async def test_timed_out_write_never_lands(store, monkeypatch):
    await store.flush({"bookings": [{"id": "b1"}]})
    before = store.path.read_text(encoding="utf-8")

    release = threading.Event()
    done = threading.Event()
    original = store._write_atomic

    def stalled(payload, ticket):
        try:
            release.wait(5)
            original(payload, ticket)
        finally:
            done.set()

    monkeypatch.setattr(store, "_write_atomic", stalled)

    with pytest.raises(Timeout):
        await store.flush({"bookings": [{"id": "b1"}, {"id": "late"}]}, timeout=0.05)

    release.set()
    assert await asyncio.to_thread(done.wait, 5)

    assert store.path.read_text(encoding="utf-8") == before
    assert [p.name for p in store.path.parent.iterdir()] == ["db.json"]


@pytest.mark.asyncio
async def test_backup_copies_data_file(store):
    await store.flush({"bookings": [{"id": "b1"}]})

    location = await store.backup()

    assert location is not None
    assert location.parent.name.startswith("backup-")
    assert location.parent.parent == store.backup_dir
    assert json.loads(location.read_text(encoding="utf-8")) == read_document(store)


@pytest.mark.asyncio
async def test_backup_without_data_file(store):
    assert await store.backup() is None


@pytest.mark.asyncio
async def test_reset_backs_up_and_reseeds(store):
    await store.flush({"bookings": [{"id": "b1"}], "users": [{"id": "u1"}]})

    location = await store.reset(reseed={"users": [{"id": "seed"}]})

    assert location is not None and location.exists()
    document = read_document(store)
    assert document["users"] == [{"id": "seed"}]
    assert document["bookings"] == []


@pytest.mark.asyncio
async def test_reset_without_reseed_deletes_file(store):
    await store.flush({"bookings": [{"id": "b1"}]})

    location = await store.reset(backup=False)

    assert location is None
    assert not store.path.exists()
    assert not store.backup_dir.exists()
    assert await store.load() == {name: [] for name in DEFAULT_COLLECTIONS}
