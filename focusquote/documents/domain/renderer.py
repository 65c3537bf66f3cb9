import logging
import re
from typing import List, Optional

from focusquote.documents.config import document_settings
from focusquote.documents.domain.document import (
    ClientBlock, DocumentHeader, ItemRow, NotesBlock, PaymentBlock, QuoteDocument,
    SignatureBlock, TotalLine, TotalsBlock
)
from focusquote.documents.domain.formatting import format_currency, format_date
from focusquote.quotes.domain.entities import Client, PhotographerProfile, Quote
from focusquote.quotes.domain.pricing import compute

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "Cliente desconhecido"
ITEM_HEADERS = ["Serviço", "Tipo", "Qtd", "Unitário", "Total"]

def export_filename(quote_number: str, client_name: str) -> str:
    """Nom du fichier exporté : Orcamento_<numéro>_<client>.pdf, espaces remplacés par '_'."""
    collapsed = re.sub(r"\s+", "_", client_name)
    return f"Orcamento_{quote_number}_{collapsed}.pdf"

def _join(*parts: Optional[str], sep: str = " | ") -> str:
    return sep.join(p for p in parts if p)

class DocumentRenderer:
    """Transforme un devis, le profil et le client en document à mise en page fixe.

    Ne lève jamais pour une donnée manquante : champ vide ou libellé par défaut.
    """

    def render(self, quote: Quote, profile: Optional[PhotographerProfile], client: Optional[Client]) -> QuoteDocument:
        if profile is None:
            logger.warning(f"[Renderer] Profil absent pour devis {quote.id}, en-tête vide.")
            profile = PhotographerProfile()
        if client is None:
            logger.warning(f"[Renderer] Client {quote.client_id!r} introuvable pour devis {quote.id}, rendu dégradé.")

        client_name = (client.name if client else "") or UNKNOWN_CLIENT
        pricing = compute(quote.items, quote.discount, quote.extra_fees)

        header = DocumentHeader(
            issuer_name=profile.studio_name or profile.name,
            issuer_lines=[
                line for line in (
                    _join(profile.name, f"CNPJ/CPF: {profile.tax_id}" if profile.tax_id else None),
                    profile.address or "",
                    _join(profile.phone, profile.email),
                ) if line
            ],
            logo_url=profile.logo_url,
            title=f"ORÇAMENTO #{quote.number}",
            issued_on=format_date(quote.date),
            valid_until=format_date(quote.valid_until),
        )

        client_lines: List[str] = []
        if client and client.email:
            client_lines.append(f"E-mail: {client.email}")
        if client and client.address:
            client_lines.append(f"Endereço: {client.address}")
        client_block = ClientBlock(
            name=client_name,
            tax_id=f"CPF/CNPJ: {(client.tax_id if client else None) or 'N/A'}",
            contact_lines=client_lines,
        )

        rows = [
            ItemRow(
                name=item.name,
                description=item.description,
                type_label=item.type.label,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
                unit_price_display=format_currency(item.unit_price),
                line_total_display=format_currency(item.line_total),
            )
            for item in quote.items
        ]

        lines = [TotalLine(label="Subtotal:", amount=pricing.subtotal, display=format_currency(pricing.subtotal))]
        if quote.discount > 0:
            lines.append(TotalLine(label="Desconto:", amount=quote.discount,
                                   display=f"- {format_currency(quote.discount)}"))
        if quote.extra_fees > 0:
            lines.append(TotalLine(label="Taxas Adicionais:", amount=quote.extra_fees,
                                   display=f"+ {format_currency(quote.extra_fees)}"))
        totals = TotalsBlock(
            lines=lines,
            grand_total=TotalLine(label="TOTAL FINAL:", amount=pricing.total, display=format_currency(pricing.total)),
        )

        notes_text = quote.notes or profile.default_terms
        notes = NotesBlock(title="OBSERVAÇÕES ADICIONAIS:", text=notes_text) if notes_text else None

        return QuoteDocument(
            quote_id=quote.id,
            quote_number=quote.number,
            header=header,
            client=client_block,
            item_headers=ITEM_HEADERS,
            items=rows,
            totals=totals,
            payment=PaymentBlock(method=f"Método: {quote.payment_method.label}", conditions=quote.payment_conditions),
            notes=notes,
            signature=SignatureBlock(name=profile.name, caption="Assinatura do Fotógrafo"),
            footer=document_settings.FOOTER_TEXT,
            filename=export_filename(quote.number, client_name),
        )
