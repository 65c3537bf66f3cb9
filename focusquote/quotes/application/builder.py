import logging
import random
from datetime import date, timedelta
from typing import Any, List, Optional

from pydantic import ValidationError

from focusquote.config import settings
from focusquote.quotes.domain.entities import Quote, QuoteItem
from focusquote.quotes.domain.exceptions import (
    QuoteItemNotFoundException, QuoteValidationException
)
from focusquote.quotes.domain.lifecycle import is_locked_for_edit
from focusquote.quotes.domain.pricing import PricingResult, compute, reprice
from focusquote.quotes.domain.repositories import AbstractQuoteRepository

logger = logging.getLogger(__name__)

APPROVED_EDIT_WARNING = (
    "Ce devis a déjà été approuvé par le client : les modifications "
    "seront visibles sur le lien public."
)

# Champs d'une ligne que l'on peut modifier individuellement
EDITABLE_ITEM_FIELDS = ("name", "description", "unit_price", "quantity", "type")

def _first_error(e: ValidationError) -> tuple[str, Optional[str]]:
    error = e.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or None
    return error.get("msg", str(e)), field

def new_draft(today: Optional[date] = None) -> Quote:
    """Brouillon vierge avec les valeurs par défaut du studio."""
    today = today or date.today()
    return Quote(
        number=str(random.randint(1000, 9999)),
        date=today,
        valid_until=today + timedelta(days=settings.QUOTE_VALIDITY_DAYS),
        payment_conditions=settings.DEFAULT_PAYMENT_CONDITIONS,
    )

class QuoteBuilder:
    """Assemble ou modifie un brouillon de devis puis l'enregistre dans la collection.

    Le brouillon est une copie : rien n'est écrit avant `commit()`.
    """

    def __init__(self,
                 repository: AbstractQuoteRepository,
                 owner_id: str,
                 quote: Optional[Quote] = None,
                 today: Optional[date] = None):
        self.repository = repository
        self.owner_id = owner_id
        self.draft = quote.model_copy(deep=True) if quote else new_draft(today)
        self.warnings: List[str] = []
        if quote is not None and is_locked_for_edit(quote):
            logger.warning(f"[QuoteBuilder] Édition du devis approuvé {quote.id} par {owner_id}.")
            self.warnings.append(APPROVED_EDIT_WARNING)

    @property
    def totals(self) -> PricingResult:
        """Sous-total et total du brouillon, recalculés à chaque lecture."""
        return compute(self.draft.items, self.draft.discount, self.draft.extra_fees)

    def _apply(self, **updates: Any) -> None:
        data = self.draft.model_dump()
        data.update(updates)
        try:
            self.draft = Quote.model_validate(data)
        except ValidationError as e:
            message, field = _first_error(e)
            raise QuoteValidationException(message, field=field)

    def _find_item(self, item_id: str) -> QuoteItem:
        for item in self.draft.items:
            if item.id == item_id:
                return item
        raise QuoteItemNotFoundException(item_id)

    # --- Lignes ---

    def add_item(self, **fields: Any) -> QuoteItem:
        """Ajoute une ligne (par défaut : forfait, quantité 1, prix 0) en fin de liste."""
        try:
            item = QuoteItem(**fields)
        except ValidationError as e:
            message, field = _first_error(e)
            raise QuoteValidationException(message, field=field)
        self.draft.items.append(item)
        return item

    def remove_item(self, item_id: str) -> None:
        item = self._find_item(item_id)
        self.draft.items.remove(item)

    def update_item(self, item_id: str, field: str, value: Any) -> QuoteItem:
        if field not in EDITABLE_ITEM_FIELDS:
            raise QuoteValidationException(f"Champ de ligne non modifiable: {field}", field=field)
        item = self._find_item(item_id)
        try:
            setattr(item, field, value)
        except ValidationError as e:
            message, _ = _first_error(e)
            raise QuoteValidationException(message, field=field)
        return item

    # --- En-tête et conditions ---

    def set_client(self, client_id: str) -> None:
        self._apply(client_id=client_id or "")

    def set_dates(self, quote_date: date, valid_until: Optional[date] = None) -> None:
        self._apply(date=quote_date, valid_until=valid_until)

    def set_financials(self,
                       discount=None,
                       extra_fees=None,
                       payment_method=None,
                       payment_conditions: Optional[str] = None,
                       notes: Optional[str] = None) -> None:
        """Met à jour les champs fournis (None = inchangé, sauf `notes` vidées par une chaîne vide)."""
        updates = {
            "discount": discount,
            "extra_fees": extra_fees,
            "payment_method": payment_method,
            "payment_conditions": payment_conditions,
        }
        updates = {k: v for k, v in updates.items() if v is not None}
        if notes is not None:
            updates["notes"] = notes or None
        self._apply(**updates)

    # --- Enregistrement ---

    def validate(self) -> None:
        if not self.draft.client_id:
            raise QuoteValidationException("Un client doit être sélectionné.", field="client_id")
        if not self.draft.items:
            raise QuoteValidationException("Le devis doit contenir au moins une ligne.", field="items")

    async def commit(self) -> Quote:
        """Valide puis remplace (même ID) ou insère en tête de la collection du propriétaire."""
        self.validate()
        quote = reprice(self.draft)

        async with self.repository.locked(self.owner_id):
            quotes = await self.repository.load(self.owner_id) or []
            for index, existing in enumerate(quotes):
                if existing.id == quote.id:
                    quotes[index] = quote
                    logger.info(f"[QuoteBuilder] Devis {quote.id} (#{quote.number}) remplacé pour {self.owner_id}.")
                    break
            else:
                quotes.insert(0, quote)
                logger.info(f"[QuoteBuilder] Devis {quote.id} (#{quote.number}) créé pour {self.owner_id}.")
            await self.repository.save(self.owner_id, quotes)

        self.draft = quote
        return quote
