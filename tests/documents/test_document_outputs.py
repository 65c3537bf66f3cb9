"""
Tests des supports de sortie : PDF ReportLab et HTML Jinja2.
"""
import pytest

from focusquote.documents.application.services import DocumentService
from focusquote.documents.domain.exceptions import PDFGenerationException, TemplateNotFoundException
from focusquote.documents.domain.renderer import DocumentRenderer
from focusquote.documents.infrastructure.html_renderer import JinjaHTMLRenderer
from focusquote.documents.infrastructure.reportlab_generator import ReportLabPDFGenerator
from focusquote.quotes.domain.entities import Client, PhotographerProfile

from conftest import CLIENT_ID, MockPDFGenerator, make_quote

PROFILE = PhotographerProfile(name="Ana Souza", studio_name="Ana <Foto> & Cia")
CLIENT = Client(id=CLIENT_ID, name="Maria da Silva")

@pytest.mark.asyncio
async def test_reportlab_pdf_is_deterministic(tmp_path):
    document = DocumentRenderer().render(make_quote(), PROFILE, CLIENT)
    generator = ReportLabPDFGenerator()

    output = tmp_path / "out" / document.filename
    first = await generator.generate_quote_pdf(document, output_path=str(output))
    second = await generator.generate_quote_pdf(document)

    assert first.startswith(b"%PDF")
    assert first == second
    assert output.read_bytes() == first

def test_html_contains_same_content_as_document():
    document = DocumentRenderer().render(make_quote(notes="Inclui drone"), PROFILE, CLIENT)
    html = JinjaHTMLRenderer().render_html(document)

    assert "ORÇAMENTO #1234" in html
    assert "Ana &lt;Foto&gt; &amp; Cia" in html
    for row in document.items:
        assert row.name in html
        assert row.line_total_display in html
    assert "Inclui drone" in html
    assert "Assinatura do Fotógrafo" in html

def test_html_missing_template(tmp_path):
    renderer = JinjaHTMLRenderer(templates_dir=str(tmp_path))
    document = DocumentRenderer().render(make_quote(), PROFILE, CLIENT)
    with pytest.raises(TemplateNotFoundException):
        renderer.render_html(document)

@pytest.mark.asyncio
async def test_document_service_export():
    service = DocumentService(pdf_generator=MockPDFGenerator(), html_renderer=JinjaHTMLRenderer())
    pdf_bytes, filename = await service.export_pdf(make_quote(), PROFILE, CLIENT)
    assert pdf_bytes == b"%PDF-mock 1234"
    assert filename == "Orcamento_1234_Maria_da_Silva.pdf"

@pytest.mark.asyncio
async def test_document_service_propagates_generation_errors():
    service = DocumentService(pdf_generator=MockPDFGenerator(), html_renderer=JinjaHTMLRenderer())
    with pytest.raises(PDFGenerationException):
        await service.export_pdf(make_quote(number="fail"), PROFILE, CLIENT)
