"""
Module principal de l'application FastAPI FocusQuote.

Configure le logging, les middlewares (CORS) et inclut les routeurs de l'espace
propriétaire et du lien public des devis.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from focusquote import __version__
from focusquote.config import settings
from focusquote.quotes.interfaces.api import public_quote_router, quote_router

# Configurer le logging
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.STORAGE_BACKEND != "memory":
        from focusquote.database import create_tables

        await create_tables()
        logger.info("Tables créées/vérifiées.")
    yield

app = FastAPI(
    title=settings.APP_NAME,
    description="API de devis pour photographes : calcul, cycle de vie, lien public et export PDF.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(quote_router, prefix=f"{settings.API_V1_PREFIX}/quotes", tags=["Quotes"])
app.include_router(public_quote_router, prefix=f"{settings.API_V1_PREFIX}/public/quotes", tags=["Public Quotes"])

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
