import logging
import re
from typing import List, Optional
from urllib.parse import quote as url_quote

from fastapi import APIRouter, Body, HTTPException, Path, Query, Response, status
from fastapi.responses import HTMLResponse

from focusquote.config import settings

# Services Applicatifs (via dépendances)
from focusquote.documents.interfaces.dependencies import DocumentServiceDep
from .dependencies import CurrentOwnerDep, PublicLinkResolverDep, QuoteServiceDep

# Schémas/DTOs
from focusquote.quotes.application.schemas import (
    DashboardStats, PublicLinkResponse, PublicQuoteResponse, QuotePayload, QuoteResponse,
    QuoteSummary, StatusEventRequest
)

# Exceptions du Domaine (pour mapping)
from focusquote.documents.domain.exceptions import DocumentDomainException
from focusquote.quotes.domain.entities import QuoteStatus
from focusquote.quotes.domain.exceptions import (
    InvalidQuoteStatusException, PublicQuoteNotFoundException,
    QuoteNotFoundException, QuoteValidationException
)
from focusquote.storage.domain.exceptions import StorageException

logger = logging.getLogger(__name__)

# --- Création des Routeurs ---
quote_router = APIRouter()
public_quote_router = APIRouter()

def _validation_error(e: QuoteValidationException) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"message": e.message, "field": e.field},
    )

def _storage_error(e: StorageException) -> HTTPException:
    logger.error(f"Erreur de stockage: {e}", exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=settings.STORAGE_ERROR_MSG)

def content_disposition(filename: str) -> str:
    """En-tête Content-Disposition : repli ASCII sans guillemets ni antislash, puis filename* UTF-8."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii")
    ascii_name = re.sub(r'["\\\x00-\x1f\x7f]', "", ascii_name) or "Orcamento.pdf"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{url_quote(filename, safe='')}"

def _pdf_response(pdf_bytes: bytes, filename: str) -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )

# ======================================================
# Espace propriétaire
# ======================================================

@quote_router.get("/", response_model=List[QuoteSummary])
async def list_quotes(
    quote_service: QuoteServiceDep,
    owner_id: CurrentOwnerDep,
    search: Optional[str] = Query(None, description="Numéro du devis ou nom du client"),
    status_filter: Optional[QuoteStatus] = Query(None, alias="status", description="Filtrer par statut"),
):
    """Liste les devis du propriétaire."""
    logger.info(f"API list_quotes pour {owner_id} (search={search!r}, status={status_filter})")
    try:
        return await quote_service.list_quotes(owner_id, search=search, status=status_filter)
    except StorageException as e:
        raise _storage_error(e)

@quote_router.get("/stats", response_model=DashboardStats)
async def read_dashboard(quote_service: QuoteServiceDep, owner_id: CurrentOwnerDep):
    """Chiffres du tableau de bord."""
    try:
        return await quote_service.get_dashboard(owner_id)
    except StorageException as e:
        raise _storage_error(e)

@quote_router.post("/", response_model=QuoteResponse, status_code=status.HTTP_201_CREATED)
async def create_quote(quote_request: QuotePayload, quote_service: QuoteServiceDep, owner_id: CurrentOwnerDep):
    """Crée un devis (brouillon) pour le propriétaire."""
    logger.info(f"API create_quote pour {owner_id}")
    try:
        quote, warnings = await quote_service.create_quote(owner_id, quote_request)
    except QuoteValidationException as e:
        logger.warning(f"Erreur validation création devis pour {owner_id}: {e}")
        raise _validation_error(e)
    except StorageException as e:
        raise _storage_error(e)
    return QuoteResponse.from_entity(quote, warnings)

@quote_router.get("/{quote_id}", response_model=QuoteResponse)
async def read_quote(
    quote_service: QuoteServiceDep,
    owner_id: CurrentOwnerDep,
    quote_id: str = Path(..., title="ID du devis"),
):
    try:
        quote = await quote_service.get_quote(owner_id, quote_id)
    except QuoteNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageException as e:
        raise _storage_error(e)
    return QuoteResponse.from_entity(quote)

@quote_router.put("/{quote_id}", response_model=QuoteResponse)
async def update_quote(
    quote_request: QuotePayload,
    quote_service: QuoteServiceDep,
    owner_id: CurrentOwnerDep,
    quote_id: str = Path(..., title="ID du devis à modifier"),
):
    """Remplace le contenu d'un devis. Un devis approuvé reste modifiable (avertissement renvoyé)."""
    logger.info(f"API update_quote: ID={quote_id} par {owner_id}")
    try:
        quote, warnings = await quote_service.update_quote(owner_id, quote_id, quote_request)
    except QuoteNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except QuoteValidationException as e:
        logger.warning(f"Erreur validation édition devis {quote_id}: {e}")
        raise _validation_error(e)
    except StorageException as e:
        raise _storage_error(e)
    return QuoteResponse.from_entity(quote, warnings)

@quote_router.patch("/{quote_id}/status", response_model=QuoteResponse)
async def update_quote_status(
    quote_service: QuoteServiceDep,
    owner_id: CurrentOwnerDep,
    quote_id: str = Path(..., title="ID du devis"),
    status_update: StatusEventRequest = Body(...),
):
    """Envoi, approbation ou refus par le propriétaire."""
    logger.info(f"API update_quote_status: ID={quote_id} événement '{status_update.event}' par {owner_id}")
    try:
        quote = await quote_service.apply_event(owner_id, quote_id, status_update.event)
    except QuoteNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidQuoteStatusException as e:
        logger.warning(f"Événement invalide pour devis {quote_id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageException as e:
        raise _storage_error(e)
    return QuoteResponse.from_entity(quote)

@quote_router.delete("/{quote_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quote(
    quote_service: QuoteServiceDep,
    owner_id: CurrentOwnerDep,
    quote_id: str = Path(..., title="ID du devis à supprimer"),
):
    logger.info(f"API delete_quote: ID={quote_id} par {owner_id}")
    try:
        deleted = await quote_service.delete_quote(owner_id, quote_id)
    except StorageException as e:
        raise _storage_error(e)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Devis non trouvé")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@quote_router.get("/{quote_id}/link", response_model=PublicLinkResponse)
async def read_public_link(
    quote_service: QuoteServiceDep,
    resolver: PublicLinkResolverDep,
    owner_id: CurrentOwnerDep,
    quote_id: str = Path(..., title="ID du devis"),
):
    """Lien public à transmettre au client, avec le message WhatsApp si le client a un téléphone."""
    try:
        quote = await quote_service.get_quote(owner_id, quote_id)
        url = resolver.build_link(quote.id, owner_id)
        try:
            share = await resolver.share(quote, owner_id)
        except QuoteValidationException as e:
            logger.info(f"Pas de message WhatsApp pour devis {quote_id}: {e}")
            return PublicLinkResponse(url=url)
    except QuoteNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageException as e:
        raise _storage_error(e)
    return PublicLinkResponse(url=url, message=share.text, whatsapp_url=share.whatsapp_url)

@quote_router.get("/{quote_id}/document", response_class=HTMLResponse)
async def preview_quote(
    quote_service: QuoteServiceDep,
    document_service: DocumentServiceDep,
    owner_id: CurrentOwnerDep,
    quote_id: str = Path(..., title="ID du devis"),
):
    """Aperçu HTML. Client ou profil manquant : rendu dégradé, pas d'erreur."""
    try:
        quote, profile, client = await quote_service.get_document_sources(owner_id, quote_id)
        html = document_service.render_html(quote, profile, client)
    except QuoteNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DocumentDomainException as e:
        logger.error(f"Erreur rendu HTML devis {quote_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne rendu du devis.")
    except StorageException as e:
        raise _storage_error(e)
    return HTMLResponse(content=html)

@quote_router.get("/{quote_id}/pdf")
async def export_quote_pdf(
    quote_service: QuoteServiceDep,
    document_service: DocumentServiceDep,
    owner_id: CurrentOwnerDep,
    quote_id: str = Path(..., title="ID du devis"),
):
    try:
        quote, profile, client = await quote_service.get_document_sources(owner_id, quote_id)
        pdf_bytes, filename = await document_service.export_pdf(quote, profile, client)
    except QuoteNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DocumentDomainException as e:
        logger.error(f"Erreur génération PDF: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne génération PDF.")
    except StorageException as e:
        raise _storage_error(e)
    return _pdf_response(pdf_bytes, filename)

# ======================================================
# Lien public (sans authentification)
# ======================================================

def _public_not_found(e: PublicQuoteNotFoundException) -> HTTPException:
    logger.info(f"Lien public non résolu: {e}")
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=settings.PUBLIC_NOT_FOUND_MSG)

@public_quote_router.get("", response_model=PublicQuoteResponse)
async def read_public_quote(
    resolver: PublicLinkResolverDep,
    q: str = Query(..., description="ID du devis"),
    u: str = Query(..., description="ID du propriétaire"),
):
    """Consultation par le client. Marque le devis comme vu s'il était brouillon ou envoyé."""
    try:
        resolved = await resolver.resolve(q, u)
    except PublicQuoteNotFoundException as e:
        raise _public_not_found(e)
    except StorageException as e:
        raise _storage_error(e)
    return PublicQuoteResponse(
        quote=QuoteResponse.from_entity(resolved.quote),
        profile=resolved.profile,
        client=resolved.client,
    )

@public_quote_router.get("/document", response_class=HTMLResponse)
async def read_public_document(
    resolver: PublicLinkResolverDep,
    document_service: DocumentServiceDep,
    q: str = Query(...),
    u: str = Query(...),
):
    try:
        resolved = await resolver.resolve(q, u)
        html = document_service.render_html(resolved.quote, resolved.profile, resolved.client)
    except PublicQuoteNotFoundException as e:
        raise _public_not_found(e)
    except DocumentDomainException as e:
        logger.error(f"Erreur rendu HTML public devis {q}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne rendu du devis.")
    except StorageException as e:
        raise _storage_error(e)
    return HTMLResponse(content=html)

@public_quote_router.get("/pdf")
async def download_public_pdf(
    resolver: PublicLinkResolverDep,
    document_service: DocumentServiceDep,
    q: str = Query(...),
    u: str = Query(...),
):
    try:
        resolved = await resolver.resolve(q, u)
        pdf_bytes, filename = await document_service.export_pdf(resolved.quote, resolved.profile, resolved.client)
    except PublicQuoteNotFoundException as e:
        raise _public_not_found(e)
    except DocumentDomainException as e:
        logger.error(f"Erreur génération PDF: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne génération PDF.")
    except StorageException as e:
        raise _storage_error(e)
    return _pdf_response(pdf_bytes, filename)

@public_quote_router.post("/approve", response_model=QuoteResponse)
async def approve_public_quote(
    resolver: PublicLinkResolverDep,
    q: str = Query(...),
    u: str = Query(...),
):
    """Approbation par le client. Répéter l'appel ne change rien."""
    try:
        quote = await resolver.approve(q, u)
    except PublicQuoteNotFoundException as e:
        raise _public_not_found(e)
    except StorageException as e:
        raise _storage_error(e)
    return QuoteResponse.from_entity(quote)
