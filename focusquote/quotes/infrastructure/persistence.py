import logging
from typing import AsyncContextManager, List, Optional

from pydantic import TypeAdapter, ValidationError

from focusquote.quotes.domain.entities import Client, PhotographerProfile, Quote
from focusquote.quotes.domain.pricing import reprice
from focusquote.quotes.domain.repositories import (
    AbstractClientDirectory, AbstractProfileDirectory, AbstractQuoteRepository
)
from focusquote.quotes.infrastructure.locks import OwnerLocks
from focusquote.storage.domain.exceptions import StorageException
from focusquote.storage.domain.store import (
    CLIENTS_KEY, PROFILE_KEY, QUOTES_KEY, AbstractKeyValueStore
)

logger = logging.getLogger(__name__)

_quotes_adapter = TypeAdapter(List[Quote])
_clients_adapter = TypeAdapter(List[Client])

class KeyValueQuoteRepository(AbstractQuoteRepository):
    """Collection de devis sérialisée en JSON sous la clé `quotes` du propriétaire."""

    def __init__(self, store: AbstractKeyValueStore, locks: OwnerLocks):
        self.store = store
        self.locks = locks

    def locked(self, owner_id: str) -> AsyncContextManager[None]:
        return self.locks.hold(owner_id)

    async def load(self, owner_id: str) -> Optional[List[Quote]]:
        logger.debug(f"[Repo Quote] Chargement collection de {owner_id}")
        raw = await self.store.get(owner_id, QUOTES_KEY)
        if raw is None:
            return None
        try:
            stored = _quotes_adapter.validate_json(raw)
        except ValidationError as e:
            logger.error(f"[Repo Quote] Collection illisible pour {owner_id}: {e}")
            raise StorageException(f"collection de devis invalide pour {owner_id}", original_exception=e)

        quotes = []
        for quote in stored:
            repriced = reprice(quote)
            if repriced.total != quote.total:
                logger.warning(
                    f"[Repo Quote] Total stocké incohérent pour devis {quote.id} "
                    f"({quote.total} au lieu de {repriced.total}), recalculé."
                )
            quotes.append(repriced)
        return quotes

    async def save(self, owner_id: str, quotes: List[Quote]) -> None:
        quotes = [reprice(q) for q in quotes]
        logger.debug(f"[Repo Quote] Écriture de {len(quotes)} devis pour {owner_id}")
        await self.store.set(owner_id, QUOTES_KEY, _quotes_adapter.dump_json(quotes))

class KeyValueClientDirectory(AbstractClientDirectory):
    """Clients écrits par le module de gestion des clients sous la clé `clients`."""

    def __init__(self, store: AbstractKeyValueStore):
        self.store = store

    async def list(self, owner_id: str) -> List[Client]:
        raw = await self.store.get(owner_id, CLIENTS_KEY)
        if raw is None:
            return []
        try:
            return _clients_adapter.validate_json(raw)
        except ValidationError as e:
            logger.error(f"[Repo Client] Liste de clients illisible pour {owner_id}: {e}")
            raise StorageException(f"liste de clients invalide pour {owner_id}", original_exception=e)

    async def get(self, owner_id: str, client_id: str) -> Optional[Client]:
        for client in await self.list(owner_id):
            if client.id == client_id:
                return client
        return None

class KeyValueProfileDirectory(AbstractProfileDirectory):
    """Profil du photographe sous la clé `profile`."""

    def __init__(self, store: AbstractKeyValueStore):
        self.store = store

    async def get(self, owner_id: str) -> Optional[PhotographerProfile]:
        raw = await self.store.get(owner_id, PROFILE_KEY)
        if raw is None:
            return None
        try:
            return PhotographerProfile.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"[Repo Profil] Profil illisible pour {owner_id}: {e}")
            raise StorageException(f"profil invalide pour {owner_id}", original_exception=e)
