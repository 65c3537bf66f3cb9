import logging
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from focusquote.config import settings

# Repositories
from focusquote.quotes.domain.repositories import (
    AbstractClientDirectory, AbstractProfileDirectory, AbstractQuoteRepository
)
from focusquote.quotes.infrastructure.locks import OwnerLocks
from focusquote.quotes.infrastructure.persistence import (
    KeyValueClientDirectory, KeyValueProfileDirectory, KeyValueQuoteRepository
)
from focusquote.storage.interfaces.dependencies import KeyValueStoreDep

# Services
from focusquote.quotes.application.public_links import PublicLinkResolver
from focusquote.quotes.application.services import QuoteService

logger = logging.getLogger(__name__)

# Un registre de verrous par processus
_owner_locks = OwnerLocks()

def get_owner_locks() -> OwnerLocks:
    return _owner_locks

OwnerLocksDep = Annotated[OwnerLocks, Depends(get_owner_locks)]

# --- Propriétaire courant ---

def get_current_owner_id(x_owner_id: Annotated[Optional[str], Header()] = None) -> str:
    """Identifiant du propriétaire transmis par la couche de session (en-tête X-Owner-Id)."""
    if not x_owner_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Propriétaire non identifié.")
    return x_owner_id

CurrentOwnerDep = Annotated[str, Depends(get_current_owner_id)]

# --- Dépendances Repository ---

def get_quote_repository(store: KeyValueStoreDep, locks: OwnerLocksDep) -> AbstractQuoteRepository:
    """Injecte KeyValueQuoteRepository."""
    logger.debug("Fourniture de KeyValueQuoteRepository")
    return KeyValueQuoteRepository(store=store, locks=locks)

QuoteRepositoryDep = Annotated[AbstractQuoteRepository, Depends(get_quote_repository)]

def get_client_directory(store: KeyValueStoreDep) -> AbstractClientDirectory:
    return KeyValueClientDirectory(store=store)

ClientDirectoryDep = Annotated[AbstractClientDirectory, Depends(get_client_directory)]

def get_profile_directory(store: KeyValueStoreDep) -> AbstractProfileDirectory:
    return KeyValueProfileDirectory(store=store)

ProfileDirectoryDep = Annotated[AbstractProfileDirectory, Depends(get_profile_directory)]

# --- Dépendances Service ---

def get_quote_service(
    quote_repo: QuoteRepositoryDep,
    client_directory: ClientDirectoryDep,
    profile_directory: ProfileDirectoryDep
) -> QuoteService:
    """Injecte QuoteService avec ses dépendances."""
    logger.debug("Fourniture de QuoteService")
    return QuoteService(quote_repo=quote_repo, client_directory=client_directory, profile_directory=profile_directory)

QuoteServiceDep = Annotated[QuoteService, Depends(get_quote_service)]

def get_public_link_resolver(
    quote_repo: QuoteRepositoryDep,
    client_directory: ClientDirectoryDep,
    profile_directory: ProfileDirectoryDep
) -> PublicLinkResolver:
    logger.debug("Fourniture de PublicLinkResolver")
    return PublicLinkResolver(
        quote_repo=quote_repo,
        client_directory=client_directory,
        profile_directory=profile_directory,
        base_url=settings.PUBLIC_APP_URL,
    )

PublicLinkResolverDep = Annotated[PublicLinkResolver, Depends(get_public_link_resolver)]
