"""
Schemas Pydantic de checkout, pedidos de produção, leads e painel admin.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...utils.dates import as_utc
from .auth_schemas import normalize_email

PaymentMethodLiteral = Literal["card", "pix", "boleto"]
ProductionStatusLiteral = Literal[
    "new", "in_production", "waiting_data", "ready", "delivered", "cancelled"
]
PriorityLiteral = Literal["low", "normal", "high", "urgent"]
LeadStatusLiteral = Literal["pending", "contacted", "converted", "rejected"]


# ─── Checkout ──────────────────────────────────────────────────────────────


class PlanOut(BaseModel):
    id: str
    name: str
    description: str
    price_cents: int
    price_formatted: str
    currency: str
    interval: Literal["month", "year", "one_time"]
    features: List[str]
    popular: bool = False


class PaymentIntentCreate(BaseModel):
    plan_id: str = Field(min_length=1, max_length=32)
    payment_method: PaymentMethodLiteral
    memorial_id: Optional[int] = None


class CardPaymentIn(BaseModel):
    """Dados do cartão para o gateway simulado (nunca persistidos)."""

    card_number: str = Field(min_length=1, max_length=32)
    holder_name: Optional[str] = Field(default=None, max_length=255)
    exp_month: Optional[str] = Field(default=None, max_length=2)
    exp_year: Optional[str] = Field(default=None, max_length=4)
    cvc: Optional[str] = Field(default=None, max_length=4)


class PaymentOut(BaseModel):
    id: int
    provider: str
    provider_payment_id: str
    plan_id: str
    method: PaymentMethodLiteral
    amount: int
    amount_formatted: str
    currency: str
    status: Literal["pending", "succeeded", "failed", "canceled"]
    client_secret: Optional[str] = None
    memorial_id: Optional[int] = None
    pix_code: Optional[str] = None
    pix_qr_code: Optional[str] = None
    boleto_url: Optional[str] = None
    boleto_barcode: Optional[str] = None
    expires_at: Optional[datetime] = None
    failure_code: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime


class PaymentResultOut(BaseModel):
    success: bool
    message: str
    payment: PaymentOut


# ─── Pedidos de produção ───────────────────────────────────────────────────


class OrderCreate(BaseModel):
    memorial_id: int
    priority: PriorityLiteral = "normal"
    notes: Optional[str] = Field(default=None, max_length=5000)
    estimated_delivery: Optional[datetime] = None
    assigned_to: Optional[str] = Field(default=None, max_length=255)

    @field_validator("estimated_delivery")
    @classmethod
    def normalize_delivery(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Datas sem fuso chegam do formulário admin; tratadas como UTC
        return as_utc(v)


class OrderUpdate(BaseModel):
    production_status: Optional[ProductionStatusLiteral] = None
    priority: Optional[PriorityLiteral] = None
    notes: Optional[str] = Field(default=None, max_length=5000)
    internal_notes: Optional[str] = Field(default=None, max_length=5000)
    estimated_delivery: Optional[datetime] = None
    assigned_to: Optional[str] = Field(default=None, max_length=255)
    history_note: Optional[str] = Field(
        default=None, max_length=1000, description="Observação registrada no histórico"
    )

    @field_validator("estimated_delivery")
    @classmethod
    def normalize_delivery(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class OrderHistoryOut(BaseModel):
    id: int
    previous_status: Optional[str] = None
    new_status: str
    changed_by: str
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class OrderOut(BaseModel):
    id: int
    memorial_id: int
    funeral_home_id: Optional[int] = None
    family_user_id: Optional[int] = None
    payment_id: Optional[int] = None
    production_status: ProductionStatusLiteral
    production_status_label: str
    priority: PriorityLiteral
    priority_label: str
    notes: Optional[str] = None
    internal_notes: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrderDetailOut(OrderOut):
    history: List[OrderHistoryOut] = Field(default_factory=list)


# ─── Leads ─────────────────────────────────────────────────────────────────


class LeadCreate(BaseModel):
    """Formulário público de contato (POST /api/leads)."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=320)
    phone: Optional[str] = Field(default=None, max_length=20)
    accept_emails: bool = False
    notes: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Nome é obrigatório")
        return v


class LeadUpdate(BaseModel):
    status: Optional[LeadStatusLiteral] = None
    notes: Optional[str] = Field(default=None, max_length=5000)


class LeadOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    accept_emails: bool
    status: LeadStatusLiteral
    status_label: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ─── Painel admin ──────────────────────────────────────────────────────────


class AdminStatsOut(BaseModel):
    total_memorials: int
    active_memorials: int
    pending_memorials: int
    inactive_memorials: int
    total_funeral_homes: int
    total_family_users: int
    total_dedications: int
    total_leads: int
    pending_leads: int
    total_orders: int
    orders_by_status: Dict[str, int]
    revenue_cents: int
    revenue_formatted: str


class FuneralHomeOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class FamilyUserOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    is_active: bool
    invitation_pending: bool
    created_at: datetime
