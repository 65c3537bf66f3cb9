"""Calcul des montants d'un devis.

Fonctions pures en Decimal : aucun arrondi ici, l'arrondi à deux décimales
n'intervient qu'à l'affichage.
"""

from decimal import Decimal
from typing import Iterable, NamedTuple

from .entities import Quote, QuoteItem

ZERO = Decimal("0")

def _to_decimal(value) -> Decimal:
    # Passage par str() : Decimal(0.1) garderait l'erreur binaire du float
    return value if isinstance(value, Decimal) else Decimal(str(value))

class PricingResult(NamedTuple):
    subtotal: Decimal
    total: Decimal

def compute(items: Iterable[QuoteItem], discount: Decimal = ZERO, extra_fees: Decimal = ZERO) -> PricingResult:
    """subtotal = Σ prix unitaire × quantité ; total = subtotal - remise + frais.

    Le total n'est pas borné à zéro : une remise supérieure au sous-total donne un total négatif.
    """
    subtotal = sum((item.unit_price * item.quantity for item in items), ZERO)
    total = subtotal - _to_decimal(discount) + _to_decimal(extra_fees)
    return PricingResult(subtotal=subtotal, total=total)

def reprice(quote: Quote) -> Quote:
    """Retourne le devis avec son total dérivé recalculé."""
    result = compute(quote.items, quote.discount, quote.extra_fees)
    if result.total == quote.total:
        return quote
    return quote.model_copy(update={"total": result.total})
