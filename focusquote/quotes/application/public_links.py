"""Lien public d'un devis.

Le lien porte en clair la paire (ID du devis, ID du propriétaire) : quiconque
le possède peut consulter et approuver le devis. Il n'est ni signé ni limité
dans le temps ; seule la suppression du devis le rend inutilisable.
"""

import logging
import re
from typing import NamedTuple, Optional
from urllib.parse import parse_qs, quote as url_quote, urlencode, urlsplit

from focusquote.documents.domain.formatting import format_currency
from focusquote.quotes.domain.entities import Client, PhotographerProfile, Quote
from focusquote.quotes.domain.exceptions import (
    PublicQuoteNotFoundException, QuoteValidationException
)
from focusquote.quotes.domain.lifecycle import QuoteEvent, transition
from focusquote.quotes.domain.repositories import (
    AbstractClientDirectory, AbstractProfileDirectory, AbstractQuoteRepository
)

logger = logging.getLogger(__name__)

PUBLIC_VIEW = "public"

class PublicReference(NamedTuple):
    quote_id: str
    owner_id: str

class ResolvedQuote(NamedTuple):
    quote: Quote
    profile: PhotographerProfile
    client: Client

class ShareMessage(NamedTuple):
    text: str
    whatsapp_url: str

def build_public_link(base_url: str, quote_id: str, owner_id: str) -> str:
    query = urlencode({"view": PUBLIC_VIEW, "q": quote_id, "u": owner_id})
    return f"{base_url}?{query}"

def parse_public_link(url: str) -> PublicReference:
    """Extrait la paire (devis, propriétaire) d'un lien public."""
    params = parse_qs(urlsplit(url).query)
    view = params.get("view", [""])[0]
    quote_id = params.get("q", [""])[0]
    owner_id = params.get("u", [""])[0]
    if view != PUBLIC_VIEW:
        raise QuoteValidationException("Ce lien n'est pas un lien public de devis.", field="view")
    if not quote_id or not owner_id:
        raise QuoteValidationException("Lien public incomplet (q et u requis).", field="q" if not quote_id else "u")
    return PublicReference(quote_id=quote_id, owner_id=owner_id)

def build_share_message(quote: Quote, client: Optional[Client], link: str) -> ShareMessage:
    """Message WhatsApp d'envoi du devis au client."""
    if client is None or not client.phone:
        raise QuoteValidationException("Cliente sem telefone cadastrado.", field="phone")
    text = (
        f"Olá {client.name}! 📸\n\n"
        f"Segue meu orçamento #{quote.number} no valor de {format_currency(quote.total)}.\n\n"
        f"Você pode visualizar os detalhes e aprovar online através deste link:\n{link}\n\n"
        f"Fico no aguardo!"
    )
    digits = re.sub(r"\D", "", client.phone)
    return ShareMessage(text=text, whatsapp_url=f"https://wa.me/{digits}?text={url_quote(text, safe='')}")

class PublicLinkResolver:
    """Résout un lien public et applique ses effets de bord (vu, approuvé)."""

    def __init__(self,
                 quote_repo: AbstractQuoteRepository,
                 client_directory: AbstractClientDirectory,
                 profile_directory: AbstractProfileDirectory,
                 base_url: str):
        self.quote_repo = quote_repo
        self.client_directory = client_directory
        self.profile_directory = profile_directory
        self.base_url = base_url

    def build_link(self, quote_id: str, owner_id: str) -> str:
        return build_public_link(self.base_url, quote_id, owner_id)

    async def resolve(self, quote_id: str, owner_id: str) -> ResolvedQuote:
        """Charge le devis et ses données associées, puis le marque "vu" s'il était brouillon ou envoyé.

        Raises:
            PublicQuoteNotFoundException: collection, devis, profil ou client introuvable.
        """
        logger.info(f"[PublicLink] Résolution devis {quote_id} / propriétaire {owner_id}")
        async with self.quote_repo.locked(owner_id):
            quotes = await self.quote_repo.load(owner_id)
            if quotes is None:
                raise PublicQuoteNotFoundException(quote_id, owner_id, reason="collection")
            index = next((i for i, q in enumerate(quotes) if q.id == quote_id), None)
            if index is None:
                raise PublicQuoteNotFoundException(quote_id, owner_id, reason="quote")

            profile = await self.profile_directory.get(owner_id)
            if profile is None:
                raise PublicQuoteNotFoundException(quote_id, owner_id, reason="profile")
            quote = quotes[index]
            client = await self.client_directory.get(owner_id, quote.client_id)
            if client is None:
                raise PublicQuoteNotFoundException(quote_id, owner_id, reason="client")

            viewed = transition(quote, QuoteEvent.VIEW)
            if viewed is not quote:
                quotes[index] = viewed
                await self.quote_repo.save(owner_id, quotes)
                logger.info(f"[PublicLink] Devis {quote_id} marqué comme vu.")

        return ResolvedQuote(quote=viewed, profile=profile, client=client)

    async def approve(self, quote_id: str, owner_id: str) -> Quote:
        """Approbation par le client. Idempotent : un devis déjà approuvé n'est pas réécrit."""
        logger.info(f"[PublicLink] Approbation devis {quote_id} / propriétaire {owner_id}")
        async with self.quote_repo.locked(owner_id):
            quotes = await self.quote_repo.load(owner_id)
            if quotes is None:
                raise PublicQuoteNotFoundException(quote_id, owner_id, reason="collection")
            index = next((i for i, q in enumerate(quotes) if q.id == quote_id), None)
            if index is None:
                raise PublicQuoteNotFoundException(quote_id, owner_id, reason="quote")

            approved = transition(quotes[index], QuoteEvent.APPROVE)
            if approved is not quotes[index]:
                quotes[index] = approved
                await self.quote_repo.save(owner_id, quotes)
                logger.info(f"[PublicLink] Devis {quote_id} approuvé par le client.")
        return approved

    async def share(self, quote: Quote, owner_id: str) -> ShareMessage:
        client = await self.client_directory.get(owner_id, quote.client_id)
        return build_share_message(quote, client, self.build_link(quote.id, owner_id))
