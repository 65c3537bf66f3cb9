import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

class OwnerLocks:
    """Registre de verrous asyncio, un par propriétaire.

    Ne protège que les coroutines d'un même processus : deux copies périmées
    d'un même devis restent soumises au "dernier écrivain gagne".
    Un verrou n'existe que tant qu'une coroutine le détient ou l'attend.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, owner_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(owner_id, asyncio.Lock())
        self._users[owner_id] = self._users.get(owner_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[owner_id] -= 1
            if not self._users[owner_id]:
                del self._users[owner_id]
                del self._locks[owner_id]
