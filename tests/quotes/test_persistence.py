import json
from decimal import Decimal

import pytest

from focusquote.quotes.domain.entities import QuoteStatus
from focusquote.storage.domain.exceptions import StorageException
from focusquote.storage.domain.store import CLIENTS_KEY, QUOTES_KEY

from conftest import CLIENT_ID, OWNER_ID, make_quote

@pytest.mark.asyncio
async def test_load_without_collection_returns_none(quote_repo):
    assert await quote_repo.load("nobody") is None

@pytest.mark.asyncio
async def test_empty_collection_is_distinct_from_missing(quote_repo):
    await quote_repo.save(OWNER_ID, [])
    assert await quote_repo.load(OWNER_ID) == []

@pytest.mark.asyncio
async def test_save_load_keeps_ids_and_order(quote_repo):
    first, second = make_quote(number="1"), make_quote(number="2", status=QuoteStatus.SENT)
    await quote_repo.save(OWNER_ID, [first, second])

    loaded = await quote_repo.load(OWNER_ID)
    assert [q.id for q in loaded] == [first.id, second.id]
    assert [item.id for item in loaded[0].items] == [item.id for item in first.items]
    assert loaded[1].status == QuoteStatus.SENT

@pytest.mark.asyncio
async def test_load_recomputes_tampered_total(quote_repo, kv_store, caplog):
    await quote_repo.save(OWNER_ID, [make_quote()])
    stored = json.loads(await kv_store.get(OWNER_ID, QUOTES_KEY))
    stored[0]["total"] = "1.00"
    await kv_store.set(OWNER_ID, QUOTES_KEY, json.dumps(stored).encode("utf-8"))

    loaded = await quote_repo.load(OWNER_ID)
    assert loaded[0].total == Decimal("570")
    assert "incohérent" in caplog.text

@pytest.mark.asyncio
async def test_unreadable_collection_raises_storage_error(quote_repo, kv_store):
    await kv_store.set(OWNER_ID, QUOTES_KEY, b"not json")
    with pytest.raises(StorageException):
        await quote_repo.load(OWNER_ID)

@pytest.mark.asyncio
async def test_directories_read_camel_case_records(seeded_store, client_directory, profile_directory):
    client = await client_directory.get(OWNER_ID, CLIENT_ID)
    assert client.name == "Maria da Silva"
    assert client.tax_id == "123.456.789-00"
    assert await client_directory.get(OWNER_ID, "missing") is None

    profile = await profile_directory.get(OWNER_ID)
    assert profile.studio_name == "Ana Souza Fotografia"
    assert profile.default_terms == "Entrega das fotos em até 30 dias."
    assert profile.monthly_goal == Decimal("5000")

@pytest.mark.asyncio
async def test_directories_are_owner_scoped(seeded_store, client_directory, profile_directory):
    assert await client_directory.list("other-owner") == []
    assert await profile_directory.get("other-owner") is None

@pytest.mark.asyncio
async def test_invalid_clients_raise_storage_error(kv_store, client_directory):
    await kv_store.set(OWNER_ID, CLIENTS_KEY, b'{"not": "a list"}')
    with pytest.raises(StorageException):
        await client_directory.list(OWNER_ID)
