from abc import ABC, abstractmethod
from typing import AsyncContextManager, List, Optional

from .entities import Client, PhotographerProfile, Quote

class AbstractQuoteRepository(ABC):
    """Interface abstraite pour la collection de devis d'un propriétaire.

    La collection est lue et réécrite en entier. Toute mutation se fait sous
    `locked(owner_id)` : lecture, modification puis écriture.
    """

    @abstractmethod
    def locked(self, owner_id: str) -> AsyncContextManager[None]:
        """Sérialise les lecture-modification-écriture d'un même propriétaire."""
        raise NotImplementedError

    @abstractmethod
    async def load(self, owner_id: str) -> Optional[List[Quote]]:
        """Charge la collection. None si le propriétaire n'a jamais rien enregistré."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, owner_id: str, quotes: List[Quote]) -> None:
        """Remplace la collection complète."""
        raise NotImplementedError

class AbstractClientDirectory(ABC):
    """Accès en lecture aux clients gérés par le module externe."""

    @abstractmethod
    async def get(self, owner_id: str, client_id: str) -> Optional[Client]:
        raise NotImplementedError

    @abstractmethod
    async def list(self, owner_id: str) -> List[Client]:
        raise NotImplementedError

class AbstractProfileDirectory(ABC):
    """Accès en lecture au profil du photographe."""

    @abstractmethod
    async def get(self, owner_id: str) -> Optional[PhotographerProfile]:
        raise NotImplementedError
