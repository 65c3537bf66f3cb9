import logging
from typing import Dict, Optional, Tuple

from focusquote.storage.domain.store import AbstractKeyValueStore

logger = logging.getLogger(__name__)

class InMemoryKeyValueStore(AbstractKeyValueStore):
    """Stockage en mémoire du processus (tests et STORAGE_BACKEND=memory)."""

    def __init__(self):
        self._data: Dict[Tuple[str, str], bytes] = {}

    async def get(self, owner_id: str, key: str) -> Optional[bytes]:
        logger.debug(f"[KV Mem] get {owner_id}/{key}")
        return self._data.get((owner_id, key))

    async def set(self, owner_id: str, key: str, data: bytes) -> None:
        logger.debug(f"[KV Mem] set {owner_id}/{key} ({len(data)} bytes)")
        self._data[(owner_id, key)] = bytes(data)
