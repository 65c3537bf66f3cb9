"""
Rendu HTML du devis (aperçu propriétaire et page publique du client).
"""
import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from focusquote.documents.config import document_settings
from focusquote.documents.domain.document import QuoteDocument
from focusquote.documents.domain.exceptions import TemplateNotFoundException
from focusquote.documents.domain.generator import AbstractHTMLRenderer

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
QUOTE_TEMPLATE = "quote.html"

class JinjaHTMLRenderer(AbstractHTMLRenderer):
    """
    Gestionnaire de templates HTML utilisant Jinja2.
    """

    def __init__(self, templates_dir: Optional[str] = None, template_name: str = QUOTE_TEMPLATE):
        """
        Args:
            templates_dir: Répertoire des templates (par défaut, ceux fournis avec le paquet).
            template_name: Nom du template du devis.
        """
        self.templates_dir = Path(templates_dir or document_settings.TEMPLATE_DIR or DEFAULT_TEMPLATES_DIR)
        self.template_name = template_name
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True
        )

    def render_html(self, document: QuoteDocument) -> str:
        try:
            template = self.env.get_template(self.template_name)
        except TemplateNotFound:
            logger.error(f"[HTMLRender] Template {self.template_name} absent de {self.templates_dir}")
            raise TemplateNotFoundException(template_name=self.template_name, search_path=str(self.templates_dir))
        return template.render(
            doc=document,
            primary_color=document_settings.PRIMARY_COLOR_HEX,
            brand_name=document_settings.BRAND_NAME,
        )
