import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from focusquote.config import settings
from focusquote.database import get_db_session
from focusquote.storage.domain.store import AbstractKeyValueStore
from focusquote.storage.infrastructure.memory_store import InMemoryKeyValueStore
from focusquote.storage.infrastructure.sql_store import SQLKeyValueStore

logger = logging.getLogger(__name__)

# Instance unique du store mémoire, partagée par toutes les requêtes du processus
_memory_store = InMemoryKeyValueStore()

def get_kv_store(db: AsyncSession = Depends(get_db_session)) -> AbstractKeyValueStore:
    """Fournit le store clé-valeur configuré (SQL par défaut, mémoire sinon).

    La session n'ouvre de connexion qu'au premier accès, le mode mémoire n'y touche pas.
    """
    if settings.STORAGE_BACKEND == "memory":
        logger.debug("Fourniture de InMemoryKeyValueStore")
        return _memory_store
    logger.debug("Fourniture de SQLKeyValueStore")
    return SQLKeyValueStore(session=db)

KeyValueStoreDep = Annotated[AbstractKeyValueStore, Depends(get_kv_store)]
