import pytest

from focusquote.storage.domain.store import AbstractKeyValueStore
from focusquote.storage.infrastructure.memory_store import InMemoryKeyValueStore
from focusquote.storage.infrastructure.sql_store import SQLKeyValueStore

@pytest.mark.asyncio
async def test_sql_store_roundtrip(db_session):
    store = SQLKeyValueStore(session=db_session)

    assert await store.get("owner-1", "quotes") is None
    await store.set("owner-1", "quotes", b"[]")
    await store.set("owner-1", "quotes", b'[{"id": "a"}]')

    assert await store.get("owner-1", "quotes") == b'[{"id": "a"}]'
    assert await store.get("owner-2", "quotes") is None

@pytest.mark.asyncio
async def test_sql_store_keys_are_independent(db_session):
    store = SQLKeyValueStore(session=db_session)
    await store.set("owner-1", "profile", b"{}")
    await store.set("owner-1", "clients", b"[]")

    assert await store.get("owner-1", "profile") == b"{}"
    assert await store.get("owner-1", "clients") == b"[]"

@pytest.mark.asyncio
async def test_memory_store_is_owner_scoped():
    store = InMemoryKeyValueStore()
    await store.set("owner-1", "quotes", b"[1]")
    assert await store.get("owner-1", "quotes") == b"[1]"
    assert await store.get("owner-2", "quotes") is None

def test_store_contract_is_get_and_set():
    assert AbstractKeyValueStore.__abstractmethods__ == {"get", "set"}
