import io
import logging
import os
from typing import Optional
from xml.sax.saxutils import escape

# ReportLab Imports
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

# Domain
from focusquote.documents.config import document_settings
from focusquote.documents.domain.document import QuoteDocument
from focusquote.documents.domain.exceptions import PDFGenerationException
from focusquote.documents.domain.generator import AbstractPDFGenerator

logger = logging.getLogger(__name__)

PRIMARY_COLOR = colors.HexColor(document_settings.PRIMARY_COLOR_HEX)
MUTED_COLOR = colors.HexColor("#64748b")
TEXT_COLOR = colors.HexColor("#334155")

def _p(text: str, style: ParagraphStyle) -> Paragraph:
    # Paragraph interprète un mini-balisage XML
    return Paragraph(escape(text).replace("\n", "<br/>"), style)

class ReportLabPDFGenerator(AbstractPDFGenerator):
    """Implémentation du générateur PDF utilisant ReportLab.

    La sortie dépend uniquement du document : mêmes données, même PDF
    (les métadonnées de date sont neutralisées via `invariant`).
    """

    def __init__(self):
        logger.info("[ReportLabPDFGenerator] Initialisé.")

    async def generate_quote_pdf(
        self,
        document: QuoteDocument,
        output_path: Optional[str] = None
    ) -> bytes:

        logger.info(f"[PDFGen] Génération PDF devis #{document.quote_number}")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=20 * mm,
            rightMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=25 * mm,
            title=document.header.title,
            author=document.header.issuer_name,
            invariant=1,
        )
        elements = []
        styles = getSampleStyleSheet()

        # Styles personnalisés
        title_style = ParagraphStyle(name="Issuer", parent=styles["Heading1"], textColor=PRIMARY_COLOR, fontSize=20)
        normal_style = ParagraphStyle(name="Body", parent=styles["Normal"], textColor=TEXT_COLOR, fontSize=10)
        muted_style = ParagraphStyle(name="Muted", parent=normal_style, textColor=MUTED_COLOR)
        section_style = ParagraphStyle(name="Section", parent=normal_style, fontName="Helvetica-Bold",
                                       textColor=PRIMARY_COLOR, fontSize=11, spaceBefore=6, spaceAfter=4)
        bold_style = ParagraphStyle(name="Bold", parent=normal_style, fontName="Helvetica-Bold")
        right_style = ParagraphStyle(name="Right", parent=normal_style, alignment=2)
        footer_style = ParagraphStyle(name="Footer", fontSize=8, textColor=colors.gray, alignment=1)

        # --- Construction du contenu du PDF ---

        # 1. En-tête : émetteur à gauche, numéro et dates à droite
        header = document.header
        left = [_p(header.issuer_name or " ", title_style)] + [_p(line, muted_style) for line in header.issuer_lines]
        right = [
            _p(header.title, ParagraphStyle(name="QuoteTitle", parent=bold_style, fontSize=12, alignment=2)),
            _p(f"Emissão: {header.issued_on}", right_style),
            _p(f"Válido até: {header.valid_until}", right_style),
        ]
        header_table = Table([[left, right]], colWidths=[105 * mm, 65 * mm])
        header_table.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('LINEBELOW', (0, 0), (-1, 0), 0.5, colors.HexColor("#e2e8f0")),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
        ]))
        elements.append(header_table)
        elements.append(Spacer(1, 6 * mm))

        # 2. Client
        client = document.client
        elements.append(_p("CLIENTE:", section_style))
        elements.append(_p(client.name, bold_style))
        elements.append(_p(client.tax_id, normal_style))
        for line in client.contact_lines:
            elements.append(_p(line, normal_style))
        elements.append(Spacer(1, 5 * mm))

        # 3. Tableau des lignes
        table_data = [[_p(h, ParagraphStyle(name=f"Head{i}", parent=bold_style, textColor=colors.white))
                       for i, h in enumerate(document.item_headers)]]
        for row in document.items:
            name_cell = row.name if not row.description else f"{row.name}\n{row.description}"
            table_data.append([
                _p(name_cell, normal_style),
                row.type_label,
                str(row.quantity),
                row.unit_price_display,
                row.line_total_display,
            ])

        table = Table(table_data, colWidths=[70 * mm, 25 * mm, 15 * mm, 30 * mm, 30 * mm], repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), PRIMARY_COLOR),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('ALIGN', (2, 1), (-1, -1), 'RIGHT'),
            ('FONTSIZE', (0, 1), (-1, -1), 10),
            ('TEXTCOLOR', (0, 1), (-1, -1), TEXT_COLOR),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor("#f8fafc")]),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor("#e2e8f0")),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 5 * mm))

        # 4. Totaux
        totals = document.totals
        totals_data = [[line.label, line.display] for line in totals.lines]
        totals_data.append([totals.grand_total.label, totals.grand_total.display])
        totals_table = Table(totals_data, colWidths=[40 * mm, 40 * mm], hAlign='RIGHT')
        totals_table.setStyle(TableStyle([
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('TEXTCOLOR', (0, 0), (-1, -2), MUTED_COLOR),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, -1), (-1, -1), 13),
            ('TEXTCOLOR', (0, -1), (-1, -1), TEXT_COLOR),
            ('TOPPADDING', (0, -1), (-1, -1), 8),
        ]))
        elements.append(totals_table)
        elements.append(Spacer(1, 8 * mm))

        # 5. Paiement et observations
        elements.append(_p("CONDIÇÕES DE PAGAMENTO:", section_style))
        elements.append(_p(document.payment.method, normal_style))
        if document.payment.conditions:
            elements.append(_p(document.payment.conditions, normal_style))
        if document.notes:
            elements.append(Spacer(1, 4 * mm))
            elements.append(_p(document.notes.title, section_style))
            elements.append(_p(document.notes.text, muted_style))

        # 6. Signature
        elements.append(Spacer(1, 20 * mm))
        signature = Table(
            [[_p(document.signature.name or " ", normal_style)], [_p(document.signature.caption, muted_style)]],
            colWidths=[70 * mm], hAlign='LEFT'
        )
        signature.setStyle(TableStyle([('LINEABOVE', (0, 0), (-1, 0), 0.5, TEXT_COLOR)]))
        elements.append(signature)

        # --- Fonction pour le Footer ---
        def add_footer(canvas, doc):
            canvas.saveState()
            footer = Paragraph(escape(document.footer), footer_style)
            w, h = footer.wrap(doc.width, doc.bottomMargin)
            footer.drawOn(canvas, doc.leftMargin, h)
            canvas.restoreState()

        # --- Génération du PDF dans le buffer ---
        try:
            doc.build(elements, onFirstPage=add_footer, onLaterPages=add_footer)
            pdf_bytes = buffer.getvalue()
            buffer.close()
            logger.info(f"[PDFGen] PDF devis #{document.quote_number} généré en mémoire ({len(pdf_bytes)} bytes).")
        except Exception as e:
            logger.error(f"[PDFGen] Erreur ReportLab build() pour devis #{document.quote_number}: {e}", exc_info=True)
            raise PDFGenerationException(f"Erreur lors de la construction du PDF: {e}", original_exception=e)

        if output_path:
            try:
                output_dir = os.path.dirname(output_path)
                if output_dir:
                    os.makedirs(output_dir, exist_ok=True)
                with open(output_path, "wb") as f:
                    f.write(pdf_bytes)
                logger.info(f"[PDFGen] PDF devis #{document.quote_number} sauvegardé dans: {output_path}")
            except OSError as save_err:
                logger.error(f"[PDFGen] Erreur sauvegarde PDF dans {output_path}: {save_err}", exc_info=True)
                raise PDFGenerationException(f"sauvegarde impossible dans {output_path}", original_exception=save_err)

        return pdf_bytes
