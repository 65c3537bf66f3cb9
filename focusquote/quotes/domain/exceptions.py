"""Exceptions spécifiques au domaine Quote."""

from typing import List, Optional

class QuoteDomainException(Exception):
    """Classe de base pour les exceptions du domaine Quote."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class QuoteNotFoundException(QuoteDomainException):
    """Levée lorsqu'un devis n'existe pas dans la collection du propriétaire."""
    def __init__(self, quote_id: str):
        super().__init__(f"Devis avec ID {quote_id} non trouvé.")
        self.quote_id = quote_id

class QuoteItemNotFoundException(QuoteDomainException):
    """Levée lorsqu'une ligne de devis n'existe pas dans le brouillon."""
    def __init__(self, item_id: str):
        super().__init__(f"Ligne de devis {item_id} non trouvée.")
        self.item_id = item_id

class QuoteValidationException(QuoteDomainException):
    """Levée lorsqu'un devis ne peut pas être enregistré en l'état."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

class InvalidQuoteStatusException(QuoteDomainException):
    """Levée lorsque l'événement de statut fourni est inconnu."""
    def __init__(self, event: str, allowed: List[str]):
        allowed_str = ", ".join(allowed)
        super().__init__(f"L'événement '{event}' est invalide. Événements autorisés: {allowed_str}.")
        self.event = event
        self.allowed = allowed

class PublicQuoteNotFoundException(QuoteDomainException):
    """Levée lorsqu'un lien public ne peut pas être résolu.

    `reason` indique l'élément manquant : 'collection', 'quote', 'profile' ou 'client'.
    """
    def __init__(self, quote_id: str, owner_id: str, reason: str):
        super().__init__(f"Devis public {quote_id} indisponible pour {owner_id} ({reason} manquant).")
        self.quote_id = quote_id
        self.owner_id = owner_id
        self.reason = reason
