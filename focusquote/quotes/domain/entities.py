import uuid
from datetime import date as date_type
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Entités du Domaine "Quotes"

class QuoteStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    APPROVED = "approved"
    DECLINED = "declined"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

STATUS_LABELS = {
    QuoteStatus.DRAFT: "Rascunho",
    QuoteStatus.SENT: "Enviado",
    QuoteStatus.VIEWED: "Visualizado",
    QuoteStatus.APPROVED: "Aprovado",
    QuoteStatus.DECLINED: "Recusado",
}

class ServiceType(str, Enum):
    PACKAGE = "package"
    HOURLY = "hourly"
    DAILY = "daily"

    @property
    def label(self) -> str:
        return {"package": "Pacote", "hourly": "Hora", "daily": "Diária"}[self.value]

class PaymentMethod(str, Enum):
    PIX = "pix"
    CARD = "card"
    TRANSFER = "transfer"
    CASH = "cash"

    @property
    def label(self) -> str:
        return {
            "pix": "Pix",
            "card": "Cartão de Crédito",
            "transfer": "Transferência",
            "cash": "Dinheiro",
        }[self.value]

def new_id() -> str:
    return uuid.uuid4().hex

class QuoteItem(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id)
    name: str = ""
    description: str = ""
    unit_price: Decimal = Field(Decimal("0"), ge=0)
    quantity: int = Field(1, ge=1)
    type: ServiceType = ServiceType.PACKAGE

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

class Quote(BaseModel):
    """Devis d'un propriétaire. `total` est dérivé et recalculé, jamais saisi."""

    id: str = Field(default_factory=new_id)
    number: str
    client_id: str = ""
    date: date_type
    valid_until: Optional[date_type] = None
    status: QuoteStatus = QuoteStatus.DRAFT
    items: List[QuoteItem] = []
    discount: Decimal = Field(Decimal("0"), ge=0)
    extra_fees: Decimal = Field(Decimal("0"), ge=0)
    payment_method: PaymentMethod = PaymentMethod.PIX
    payment_conditions: str = ""
    notes: Optional[str] = None
    total: Decimal = Decimal("0")

# --- Entités fournies par les collaborateurs externes (lecture seule ici) ---

class Client(BaseModel):
    # Les collaborateurs externes écrivent en camelCase (taxId, studioName...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str = ""
    tax_id: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    type: Optional[str] = None  # 'PF' ou 'PJ'
    notes: Optional[str] = None

class PhotographerProfile(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    studio_name: Optional[str] = None
    logo_url: Optional[str] = None
    tax_id: Optional[str] = None
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    default_terms: Optional[str] = None
    monthly_goal: Optional[Decimal] = None
