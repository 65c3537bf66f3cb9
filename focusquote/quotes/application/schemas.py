from datetime import date as date_type
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from focusquote.quotes.domain.entities import (
    Client, PaymentMethod, PhotographerProfile, Quote, QuoteItem, QuoteStatus, ServiceType
)
from focusquote.quotes.domain.pricing import compute

# --- Schémas d'entrée ---

class QuoteItemPayload(BaseModel):
    id: Optional[str] = None  # Conserver l'ID d'une ligne existante lors d'une édition
    name: str = ""
    description: str = ""
    unit_price: Decimal = Field(Decimal("0"), ge=0)
    quantity: int = Field(1, ge=1)
    type: ServiceType = ServiceType.PACKAGE

class QuotePayload(BaseModel):
    """Contenu d'un devis envoyé par le propriétaire (création ou édition complète)."""
    client_id: str = ""
    date: Optional[date_type] = None
    valid_until: Optional[date_type] = None
    items: List[QuoteItemPayload] = []
    discount: Decimal = Field(Decimal("0"), ge=0)
    extra_fees: Decimal = Field(Decimal("0"), ge=0)
    payment_method: PaymentMethod = PaymentMethod.PIX
    payment_conditions: Optional[str] = None
    notes: Optional[str] = None

class StatusEventRequest(BaseModel):
    event: str = Field(..., description="send, approve ou decline (view est réservé au lien public)")

# --- Schémas de sortie ---

class QuoteItemResponse(QuoteItem):
    line_total: Decimal

class QuoteResponse(BaseModel):
    id: str
    number: str
    client_id: str
    date: date_type
    valid_until: Optional[date_type] = None
    status: QuoteStatus
    status_label: str
    items: List[QuoteItemResponse]
    discount: Decimal
    extra_fees: Decimal
    payment_method: PaymentMethod
    payment_conditions: str
    notes: Optional[str] = None
    subtotal: Decimal
    total: Decimal
    warnings: List[str] = []

    @classmethod
    def from_entity(cls, quote: Quote, warnings: Optional[List[str]] = None) -> "QuoteResponse":
        pricing = compute(quote.items, quote.discount, quote.extra_fees)
        data = quote.model_dump(exclude={"items", "total"})
        return cls(
            **data,
            status_label=quote.status.label,
            items=[QuoteItemResponse(**item.model_dump(), line_total=item.line_total) for item in quote.items],
            subtotal=pricing.subtotal,
            total=pricing.total,
            warnings=warnings or [],
        )

class QuoteSummary(BaseModel):
    id: str
    number: str
    client_name: str
    date: date_type
    status: QuoteStatus
    total: Decimal

class DashboardStats(BaseModel):
    total_quotes: int
    approved_count: int
    pending_count: int
    approved_revenue: Decimal
    month_revenue: Decimal
    monthly_goal: Decimal
    goal_progress: Decimal  # pourcentage, plafonné à 100
    recent_quotes: List[QuoteSummary]

class PublicLinkResponse(BaseModel):
    url: str
    message: Optional[str] = None
    whatsapp_url: Optional[str] = None

class PublicQuoteResponse(BaseModel):
    quote: QuoteResponse
    profile: PhotographerProfile
    client: Client
