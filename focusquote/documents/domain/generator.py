from abc import ABC, abstractmethod
from typing import Optional

from .document import QuoteDocument

class AbstractPDFGenerator(ABC):
    """Interface abstraite pour un générateur de documents PDF.
    Approche orientée données, l'implémentation gère la mise en page.
    """

    @abstractmethod
    async def generate_quote_pdf(
        self,
        document: QuoteDocument,
        output_path: Optional[str] = None
    ) -> bytes:
        """Génère le PDF d'un devis.

        Args:
            document: Document déjà rendu (valeurs formatées).
            output_path: Si fourni, sauvegarde le PDF à ce chemin.
                         Sinon, le contenu binaire est uniquement retourné.

        Returns:
            Le contenu binaire du PDF généré.

        Raises:
            PDFGenerationException: Si une erreur survient durant la génération.
        """
        raise NotImplementedError

class AbstractHTMLRenderer(ABC):
    """Rendu écran du même document."""

    @abstractmethod
    def render_html(self, document: QuoteDocument) -> str:
        """
        Raises:
            TemplateNotFoundException: Si le template n'est pas trouvé.
        """
        raise NotImplementedError
