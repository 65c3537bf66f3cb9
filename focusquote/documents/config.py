"""Configuration spécifique au module Documents.

Utilise Pydantic BaseSettings pour permettre la surcharge par
des variables d'environnement si nécessaire.
"""

from pydantic_settings import BaseSettings

class DocumentSettings(BaseSettings):
    """Paramètres de mise en forme des devis (écran et PDF)."""

    CURRENCY_SYMBOL: str = "R$"
    DECIMAL_SEPARATOR: str = ","
    THOUSANDS_SEPARATOR: str = "."
    PRIMARY_COLOR_HEX: str = "#4f46e5"
    BRAND_NAME: str = "FocusQuote"
    FOOTER_TEXT: str = "Documento gerado por FocusQuote"
    TEMPLATE_DIR: str = ""  # Vide = templates fournis avec le paquet

    class Config:
        env_prefix = "DOCUMENT_"
        env_file = '.env'
        env_file_encoding = 'utf-8'
        extra = 'ignore'

document_settings = DocumentSettings()
