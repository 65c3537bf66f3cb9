import logging
from decimal import Decimal
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Charger les variables d'environnement AVANT de définir la classe Settings
load_dotenv()

class Settings(BaseSettings):
    # --- Application ---
    APP_NAME: str = "FocusQuote API"
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # --- Lien public ---
    # Base de l'URL partagée avec le client (page publique du front)
    PUBLIC_APP_URL: str = "http://localhost:5173/"

    # --- Stockage ---
    DATABASE_URL: str = "sqlite+aiosqlite:///./focusquote.db"
    DB_ECHO_LOG: bool = False
    STORAGE_BACKEND: str = "sql"  # 'sql' ou 'memory'

    # --- Valeurs par défaut des devis ---
    QUOTE_VALIDITY_DAYS: int = 15
    DEFAULT_PAYMENT_CONDITIONS: str = "50% reserva + 50% entrega"
    DEFAULT_MONTHLY_GOAL: Decimal = Decimal("5000")
    RECENT_QUOTES_LIMIT: int = 5

    # --- Messages Génériques ---
    PUBLIC_NOT_FOUND_MSG: str = "Orçamento não disponível."
    STORAGE_ERROR_MSG: str = "Un problème technique est survenu avec le stockage."

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'

settings = Settings()

if settings.STORAGE_BACKEND not in ("sql", "memory"):
    logger.warning(f"STORAGE_BACKEND inconnu '{settings.STORAGE_BACKEND}', utilisation de 'sql'.")

logger.info(f"Configuration chargée: stockage={settings.STORAGE_BACKEND}, DB={settings.DATABASE_URL}, lien public={settings.PUBLIC_APP_URL}")
