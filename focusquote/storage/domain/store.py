from abc import ABC, abstractmethod
from typing import Optional

# Clés connues dans l'espace d'un propriétaire
QUOTES_KEY = "quotes"
CLIENTS_KEY = "clients"
PROFILE_KEY = "profile"

class AbstractKeyValueStore(ABC):
    """Interface abstraite du stockage clé-valeur, cloisonné par propriétaire.

    Chaque valeur est un blob opaque remplacé en entier à chaque écriture.
    """

    @abstractmethod
    async def get(self, owner_id: str, key: str) -> Optional[bytes]:
        """Retourne la valeur brute, ou None si la clé n'existe pas pour ce propriétaire."""
        raise NotImplementedError

    @abstractmethod
    async def set(self, owner_id: str, key: str, data: bytes) -> None:
        """Remplace la valeur complète de la clé."""
        raise NotImplementedError
