"""
Modèle du document de devis, indépendant du support (écran HTML ou PDF).

Toutes les valeurs affichées sont déjà formatées ; les supports ne font que
les placer. Les montants bruts restent disponibles pour les vérifications.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

class DocumentHeader(BaseModel):
    """
    En-tête : identité de l'émetteur, numéro et dates du devis.
    """
    issuer_name: str = ""
    issuer_lines: List[str] = Field(default_factory=list, description="Adresse, CNPJ, contacts")
    logo_url: Optional[str] = None
    title: str
    issued_on: str
    valid_until: str

class ClientBlock(BaseModel):
    name: str
    tax_id: str
    contact_lines: List[str] = Field(default_factory=list)

class ItemRow(BaseModel):
    name: str
    description: str = ""
    type_label: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    unit_price_display: str
    line_total_display: str

class TotalLine(BaseModel):
    label: str
    amount: Decimal
    display: str

class TotalsBlock(BaseModel):
    """
    Lignes de totaux. Remise et frais n'apparaissent que s'ils sont non nuls.
    """
    lines: List[TotalLine]
    grand_total: TotalLine

class PaymentBlock(BaseModel):
    method: str
    conditions: str

class NotesBlock(BaseModel):
    title: str
    text: str

class SignatureBlock(BaseModel):
    name: str
    caption: str

class QuoteDocument(BaseModel):
    """
    Document complet d'un devis, prêt à être rendu.
    """
    quote_id: str
    quote_number: str
    header: DocumentHeader
    client: ClientBlock
    item_headers: List[str]
    items: List[ItemRow]
    totals: TotalsBlock
    payment: PaymentBlock
    notes: Optional[NotesBlock] = None
    signature: SignatureBlock
    footer: str = ""
    filename: str
