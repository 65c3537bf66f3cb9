import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from focusquote.config import settings
from focusquote.quotes.application.builder import QuoteBuilder
from focusquote.quotes.application.schemas import (
    DashboardStats, QuotePayload, QuoteSummary
)
from focusquote.quotes.domain.entities import (
    Client, PhotographerProfile, Quote, QuoteStatus
)
from focusquote.quotes.domain.exceptions import (
    InvalidQuoteStatusException, QuoteNotFoundException
)
from focusquote.quotes.domain.lifecycle import QuoteEvent, transition
from focusquote.quotes.domain.repositories import (
    AbstractClientDirectory, AbstractProfileDirectory, AbstractQuoteRepository
)

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT_NAME = "Cliente desconhecido"

# Événements que le propriétaire peut déclencher depuis son espace
OWNER_EVENTS = [QuoteEvent.SEND.value, QuoteEvent.APPROVE.value, QuoteEvent.DECLINE.value]

PENDING_STATUSES = (QuoteStatus.DRAFT, QuoteStatus.SENT, QuoteStatus.VIEWED)

def _find(quotes: List[Quote], quote_id: str) -> Optional[int]:
    for index, quote in enumerate(quotes):
        if quote.id == quote_id:
            return index
    return None

class QuoteService:
    """Service applicatif pour l'espace propriétaire : liste, édition, statuts, tableau de bord."""

    def __init__(self,
                 quote_repo: AbstractQuoteRepository,
                 client_directory: AbstractClientDirectory,
                 profile_directory: AbstractProfileDirectory):
        self.quote_repo = quote_repo
        self.client_directory = client_directory
        self.profile_directory = profile_directory

    async def _client_names(self, owner_id: str) -> dict:
        return {c.id: c.name for c in await self.client_directory.list(owner_id)}

    async def list_quotes(self,
                          owner_id: str,
                          search: Optional[str] = None,
                          status: Optional[QuoteStatus] = None) -> List[QuoteSummary]:
        """Liste les devis, filtrés par numéro ou nom de client et par statut."""
        logger.debug(f"[QuoteService] Listage devis de {owner_id} (search={search!r}, status={status})")
        quotes = await self.quote_repo.load(owner_id) or []
        names = await self._client_names(owner_id)
        needle = (search or "").strip().lower()

        summaries = []
        for quote in quotes:
            client_name = names.get(quote.client_id) or UNKNOWN_CLIENT_NAME
            if needle and needle not in quote.number.lower() and needle not in client_name.lower():
                continue
            if status is not None and quote.status != status:
                continue
            summaries.append(QuoteSummary(
                id=quote.id,
                number=quote.number,
                client_name=client_name,
                date=quote.date,
                status=quote.status,
                total=quote.total,
            ))
        return summaries

    async def get_quote(self, owner_id: str, quote_id: str) -> Quote:
        quotes = await self.quote_repo.load(owner_id) or []
        index = _find(quotes, quote_id)
        if index is None:
            logger.warning(f"[QuoteService] Devis {quote_id} non trouvé pour {owner_id}.")
            raise QuoteNotFoundException(quote_id)
        return quotes[index]

    def _fill(self, builder: QuoteBuilder, payload: QuotePayload) -> None:
        builder.set_client(payload.client_id)
        if payload.date is not None:
            builder.set_dates(payload.date, payload.valid_until)
        elif payload.valid_until is not None:
            builder.set_dates(builder.draft.date, payload.valid_until)

        for item in list(builder.draft.items):
            builder.remove_item(item.id)
        for item in payload.items:
            fields = item.model_dump(exclude_none=True)
            builder.add_item(**fields)

        builder.set_financials(
            discount=payload.discount,
            extra_fees=payload.extra_fees,
            payment_method=payload.payment_method,
            payment_conditions=payload.payment_conditions,
            notes=payload.notes if payload.notes is not None else "",
        )

    async def create_quote(self, owner_id: str, payload: QuotePayload) -> Tuple[Quote, List[str]]:
        logger.info(f"[QuoteService] Création devis pour {owner_id}")
        builder = QuoteBuilder(self.quote_repo, owner_id)
        self._fill(builder, payload)
        quote = await builder.commit()
        return quote, builder.warnings

    async def update_quote(self, owner_id: str, quote_id: str, payload: QuotePayload) -> Tuple[Quote, List[str]]:
        logger.info(f"[QuoteService] Édition devis {quote_id} pour {owner_id}")
        existing = await self.get_quote(owner_id, quote_id)
        builder = QuoteBuilder(self.quote_repo, owner_id, quote=existing)
        self._fill(builder, payload)
        quote = await builder.commit()
        return quote, builder.warnings

    async def apply_event(self, owner_id: str, quote_id: str, event: str) -> Quote:
        """Applique un événement de statut demandé par le propriétaire."""
        logger.info(f"[QuoteService] Événement '{event}' sur devis {quote_id} par {owner_id}")
        if event not in OWNER_EVENTS:
            raise InvalidQuoteStatusException(event=event, allowed=OWNER_EVENTS)

        async with self.quote_repo.locked(owner_id):
            quotes = await self.quote_repo.load(owner_id) or []
            index = _find(quotes, quote_id)
            if index is None:
                raise QuoteNotFoundException(quote_id)
            updated = transition(quotes[index], QuoteEvent(event))
            if updated is not quotes[index]:
                quotes[index] = updated
                await self.quote_repo.save(owner_id, quotes)
                logger.info(f"[QuoteService] Devis {quote_id} passé à '{updated.status.value}'.")
        return updated

    async def delete_quote(self, owner_id: str, quote_id: str) -> bool:
        """Supprime un devis. Son lien public devient définitivement introuvable."""
        async with self.quote_repo.locked(owner_id):
            quotes = await self.quote_repo.load(owner_id)
            if not quotes:
                return False
            index = _find(quotes, quote_id)
            if index is None:
                return False
            del quotes[index]
            await self.quote_repo.save(owner_id, quotes)
        logger.info(f"[QuoteService] Devis {quote_id} supprimé pour {owner_id}.")
        return True

    async def get_document_sources(
        self, owner_id: str, quote_id: str
    ) -> Tuple[Quote, PhotographerProfile, Optional[Client]]:
        """Devis, profil et client pour l'aperçu propriétaire (rendu dégradé si manquants)."""
        quote = await self.get_quote(owner_id, quote_id)
        profile = await self.profile_directory.get(owner_id)
        if profile is None:
            logger.warning(f"[QuoteService] Profil absent pour {owner_id}, rendu dégradé.")
            profile = PhotographerProfile()
        client = await self.client_directory.get(owner_id, quote.client_id)
        return quote, profile, client

    async def get_dashboard(self, owner_id: str, today: Optional[date] = None) -> DashboardStats:
        """Chiffres du tableau de bord : compteurs, chiffre d'affaires et objectif mensuel."""
        today = today or date.today()
        quotes = await self.quote_repo.load(owner_id) or []
        profile = await self.profile_directory.get(owner_id)
        names = await self._client_names(owner_id)

        approved = [q for q in quotes if q.status == QuoteStatus.APPROVED]
        approved_revenue = sum((q.total for q in approved), Decimal("0"))
        month_revenue = sum(
            (q.total for q in approved if q.date.year == today.year and q.date.month == today.month),
            Decimal("0"),
        )
        goal = (profile.monthly_goal if profile and profile.monthly_goal else None) or settings.DEFAULT_MONTHLY_GOAL
        progress = min(month_revenue / goal * 100, Decimal("100")) if goal > 0 else Decimal("0")

        recent = sorted(quotes, key=lambda q: q.date, reverse=True)[:settings.RECENT_QUOTES_LIMIT]
        return DashboardStats(
            total_quotes=len(quotes),
            approved_count=len(approved),
            pending_count=sum(1 for q in quotes if q.status in PENDING_STATUSES),
            approved_revenue=approved_revenue,
            month_revenue=month_revenue,
            monthly_goal=goal,
            goal_progress=progress.quantize(Decimal("0.01")),
            recent_quotes=[
                QuoteSummary(
                    id=q.id,
                    number=q.number,
                    client_name=names.get(q.client_id) or UNKNOWN_CLIENT_NAME,
                    date=q.date,
                    status=q.status,
                    total=q.total,
                )
                for q in recent
            ],
        )
