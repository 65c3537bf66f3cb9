# Standard Library
import json
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator, Optional

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

# First-Party Libraries
from focusquote.main import app
from focusquote.documents.domain.document import QuoteDocument
from focusquote.documents.domain.exceptions import PDFGenerationException
from focusquote.documents.domain.generator import AbstractPDFGenerator
from focusquote.documents.interfaces.dependencies import get_pdf_generator
from focusquote.quotes.domain.entities import Quote, QuoteItem
from focusquote.quotes.infrastructure.locks import OwnerLocks
from focusquote.quotes.infrastructure.persistence import (
    KeyValueClientDirectory, KeyValueProfileDirectory, KeyValueQuoteRepository
)
from focusquote.quotes.interfaces.dependencies import get_owner_locks
from focusquote.storage.domain.store import CLIENTS_KEY, PROFILE_KEY
from focusquote.storage.infrastructure.memory_store import InMemoryKeyValueStore
from focusquote.storage.infrastructure.sql_store import KeyValueEntry  # noqa: F401 (enregistre la table)
from focusquote.storage.interfaces.dependencies import get_kv_store

TEST_DATABASE_BASE_URL = "sqlite+aiosqlite:///:memory:"

OWNER_ID = "owner-1"
CLIENT_ID = "client-1"

# Données écrites par les modules externes (profil et clients), en camelCase
PROFILE_DATA = {
    "name": "Ana Souza",
    "studioName": "Ana Souza Fotografia",
    "taxId": "32.411.918/0001-10",
    "phone": "48 9982-5069",
    "email": "contato@anasouza.com",
    "address": "Rua José Bitencurt Neto, 232 - Sombrio",
    "defaultTerms": "Entrega das fotos em até 30 dias.",
    "monthlyGoal": 5000,
}

CLIENTS_DATA = [
    {
        "id": CLIENT_ID,
        "name": "Maria da Silva",
        "taxId": "123.456.789-00",
        "phone": "(48) 99123-4567",
        "email": "maria@example.com",
        "address": "Av. Brasil, 100",
        "type": "PF",
    },
    {"id": "client-2", "name": "Studio Lumen", "type": "PJ"},
]

def make_quote(**overrides) -> Quote:
    """Devis de test : 2 x 300 + 1 x 50, remise 100, frais 20."""
    data = dict(
        number="1234",
        client_id=CLIENT_ID,
        date=date(2024, 5, 10),
        valid_until=date(2024, 5, 25),
        items=[
            QuoteItem(name="Ensaio externo", unit_price=Decimal("300"), quantity=2),
            QuoteItem(name="Álbum", unit_price=Decimal("50"), quantity=1),
        ],
        discount=Decimal("100"),
        extra_fees=Decimal("20"),
        payment_conditions="50% reserva + 50% entrega",
        total=Decimal("570"),
    )
    data.update(overrides)
    return Quote(**data)

# --- Fixtures de stockage ---

@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()

@pytest.fixture
def owner_locks() -> OwnerLocks:
    return OwnerLocks()

@pytest.fixture
def quote_repo(kv_store, owner_locks) -> KeyValueQuoteRepository:
    return KeyValueQuoteRepository(store=kv_store, locks=owner_locks)

@pytest.fixture
def client_directory(kv_store) -> KeyValueClientDirectory:
    return KeyValueClientDirectory(store=kv_store)

@pytest.fixture
def profile_directory(kv_store) -> KeyValueProfileDirectory:
    return KeyValueProfileDirectory(store=kv_store)

@pytest_asyncio.fixture
async def seeded_store(kv_store) -> InMemoryKeyValueStore:
    """Store avec le profil et les clients du propriétaire de test."""
    await kv_store.set(OWNER_ID, PROFILE_KEY, json.dumps(PROFILE_DATA).encode("utf-8"))
    await kv_store.set(OWNER_ID, CLIENTS_KEY, json.dumps(CLIENTS_DATA).encode("utf-8"))
    return kv_store

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Crée un engine, des tables, et fournit une session DB en mémoire pour chaque test."""
    engine: AsyncEngine = create_async_engine(TEST_DATABASE_BASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()

# --- Fixtures API ---

@pytest_asyncio.fixture(scope="function")
async def test_client(seeded_store, owner_locks) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient httpx sur un store mémoire isolé, profil et clients déjà présents."""
    app.dependency_overrides[get_kv_store] = lambda: seeded_store
    app.dependency_overrides[get_owner_locks] = lambda: owner_locks
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

@pytest.fixture
def owner_headers() -> dict[str, str]:
    return {"X-Owner-Id": OWNER_ID}

# --- Fixtures PDF ---

class MockPDFGenerator(AbstractPDFGenerator):
    """Un générateur PDF simulé pour les tests."""

    def __init__(self):
        self.documents = []

    async def generate_quote_pdf(
        self,
        document: QuoteDocument,
        output_path: Optional[str] = None
    ) -> bytes:
        if document.quote_number == "fail":
            raise PDFGenerationException("Mock quote generation failed intentionally.")
        self.documents.append(document)
        return f"%PDF-mock {document.quote_number}".encode("utf-8")

@pytest.fixture
def mock_pdf_generator() -> MockPDFGenerator:
    return MockPDFGenerator()

@pytest_asyncio.fixture(scope="function")
async def test_client_with_mock_pdf(test_client, mock_pdf_generator) -> AsyncGenerator[AsyncClient, None]:
    """Comme test_client, avec un générateur PDF mocké."""
    app.dependency_overrides[get_pdf_generator] = lambda: mock_pdf_generator
    yield test_client
    app.dependency_overrides.pop(get_pdf_generator, None)
