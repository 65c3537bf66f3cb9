import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, LargeBinary
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import Field, SQLModel

from focusquote.storage.domain.exceptions import StorageException
from focusquote.storage.domain.store import AbstractKeyValueStore

logger = logging.getLogger(__name__)

# --- Modèle ORM ---

class KeyValueEntry(SQLModel, table=True):
    owner_id: str = Field(primary_key=True, max_length=100)
    key: str = Field(primary_key=True, max_length=50)
    value: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    __tablename__ = "kv_entries"

class SQLKeyValueStore(AbstractKeyValueStore):
    """Implémentation SQLAlchemy du stockage clé-valeur : une ligne par (propriétaire, clé)."""

    def __init__(self, session: AsyncSession):
        self.db = session

    async def get(self, owner_id: str, key: str) -> Optional[bytes]:
        logger.debug(f"[KV SQL] get {owner_id}/{key}")
        try:
            entry = await self.db.get(KeyValueEntry, (owner_id, key))
            return entry.value if entry else None
        except SQLAlchemyError as e:
            logger.error(f"[KV SQL] Erreur DB get {owner_id}/{key}: {e}", exc_info=True)
            raise StorageException(f"lecture {key} impossible", original_exception=e)

    async def set(self, owner_id: str, key: str, data: bytes) -> None:
        logger.debug(f"[KV SQL] set {owner_id}/{key} ({len(data)} bytes)")
        try:
            entry = await self.db.get(KeyValueEntry, (owner_id, key))
            if entry is None:
                entry = KeyValueEntry(owner_id=owner_id, key=key, value=data)
            else:
                entry.value = data
                entry.updated_at = datetime.now(timezone.utc)
            self.db.add(entry)
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"[KV SQL] Erreur DB set {owner_id}/{key}: {e}", exc_info=True)
            await self.db.rollback()
            raise StorageException(f"écriture {key} impossible", original_exception=e)
