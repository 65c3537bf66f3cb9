"""Exceptions spécifiques au stockage clé-valeur."""

from typing import Optional

class StorageException(Exception):
    """Levée lorsqu'une lecture ou écriture du stockage échoue."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        full_message = f"Erreur de stockage: {message}"
        if original_exception:
            full_message += f" (Erreur originale: {original_exception})"
        super().__init__(full_message)
        self.message = full_message
        self.original_exception = original_exception
