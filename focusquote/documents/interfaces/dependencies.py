from typing import Annotated
from fastapi import Depends

# Domain
from focusquote.documents.domain.generator import AbstractHTMLRenderer, AbstractPDFGenerator

# Infrastructure
from focusquote.documents.infrastructure.html_renderer import JinjaHTMLRenderer
from focusquote.documents.infrastructure.reportlab_generator import ReportLabPDFGenerator

# Application
from focusquote.documents.application.services import DocumentService

# --- Générateurs ---

def get_pdf_generator() -> AbstractPDFGenerator:
    """Fournit une instance de l'implémentation concrète du PDF Generator.

    Actuellement, utilise ReportLabPDFGenerator.
    """
    return ReportLabPDFGenerator()

PDFGeneratorDep = Annotated[AbstractPDFGenerator, Depends(get_pdf_generator)]

def get_html_renderer() -> AbstractHTMLRenderer:
    return JinjaHTMLRenderer()

HTMLRendererDep = Annotated[AbstractHTMLRenderer, Depends(get_html_renderer)]

# --- Service ---

def get_document_service(
    pdf_generator: PDFGeneratorDep,
    html_renderer: HTMLRendererDep
) -> DocumentService:
    """Injecte les générateurs et fournit une instance de DocumentService."""
    return DocumentService(pdf_generator=pdf_generator, html_renderer=html_renderer)

DocumentServiceDep = Annotated[DocumentService, Depends(get_document_service)]
