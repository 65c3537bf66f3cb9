"""Cycle de vie d'un devis.

Machine permissive : aucun événement n'est refusé. Toutes les règles passent
par `transition`, seul point de changement de statut.
"""

from enum import Enum

from .entities import Quote, QuoteStatus

class QuoteEvent(str, Enum):
    SEND = "send"
    VIEW = "view"
    APPROVE = "approve"
    DECLINE = "decline"

# Statuts à partir desquels une consultation publique marque le devis "vu"
VIEWABLE_STATUSES = frozenset({QuoteStatus.DRAFT, QuoteStatus.SENT})

def next_status(current: QuoteStatus, event: QuoteEvent) -> QuoteStatus:
    if event == QuoteEvent.VIEW:
        # Ne revient jamais sur un statut plus avancé
        return QuoteStatus.VIEWED if current in VIEWABLE_STATUSES else current
    if event == QuoteEvent.SEND:
        return QuoteStatus.SENT
    if event == QuoteEvent.APPROVE:
        return QuoteStatus.APPROVED
    return QuoteStatus.DECLINED

def transition(quote: Quote, event: QuoteEvent) -> Quote:
    """Retourne une copie du devis avec le statut résultant de l'événement."""
    status = next_status(quote.status, event)
    if status == quote.status:
        return quote
    return quote.model_copy(update={"status": status})

def is_locked_for_edit(quote: Quote) -> bool:
    """Un devis approuvé reste modifiable, mais l'appelant doit être prévenu."""
    return quote.status == QuoteStatus.APPROVED
