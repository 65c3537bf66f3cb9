import logging
from typing import Optional

from focusquote.documents.domain.document import QuoteDocument
from focusquote.documents.domain.exceptions import PDFGenerationException
from focusquote.documents.domain.generator import AbstractHTMLRenderer, AbstractPDFGenerator
from focusquote.documents.domain.renderer import DocumentRenderer
from focusquote.quotes.domain.entities import Client, PhotographerProfile, Quote

logger = logging.getLogger(__name__)

class DocumentService:
    """Service applicatif : un seul document rendu, décliné en HTML et en PDF."""

    def __init__(self,
                 pdf_generator: AbstractPDFGenerator,
                 html_renderer: AbstractHTMLRenderer,
                 renderer: Optional[DocumentRenderer] = None):
        self.pdf_generator = pdf_generator
        self.html_renderer = html_renderer
        self.renderer = renderer or DocumentRenderer()

    def build_document(self, quote: Quote, profile: Optional[PhotographerProfile], client: Optional[Client]) -> QuoteDocument:
        return self.renderer.render(quote, profile, client)

    def render_html(self, quote: Quote, profile: Optional[PhotographerProfile], client: Optional[Client]) -> str:
        return self.html_renderer.render_html(self.build_document(quote, profile, client))

    async def export_pdf(
        self,
        quote: Quote,
        profile: Optional[PhotographerProfile],
        client: Optional[Client],
        output_path: Optional[str] = None
    ) -> tuple[bytes, str]:
        """Génère le PDF du devis.

        Returns:
            Le contenu binaire et le nom de fichier d'export.

        Raises:
            PDFGenerationException: Si la génération échoue.
        """
        document = self.build_document(quote, profile, client)
        logger.info(f"[DocumentService] Demande de génération PDF pour devis #{document.quote_number}.")
        try:
            pdf_bytes = await self.pdf_generator.generate_quote_pdf(document, output_path=output_path)
        except PDFGenerationException as e:
            logger.error(f"[DocumentService] Échec génération PDF devis #{document.quote_number}: {e}")
            raise
        except Exception as e:
            logger.error(f"[DocumentService] Erreur inattendue génération PDF devis #{document.quote_number}: {e}", exc_info=True)
            raise PDFGenerationException(f"Erreur inattendue: {e}", original_exception=e)
        return pdf_bytes, document.filename
