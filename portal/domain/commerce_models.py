"""
Modelos comerciais: leads, pedidos de produção (placas com QR Code)
e pagamentos do checkout.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel

from portal.utils.dates import utcnow


class Lead(SQLModel, table=True):
    """Contato comercial capturado pelo formulário público."""

    __tablename__ = "leads"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=320, index=True)
    phone: Optional[str] = Field(default=None, max_length=20)
    accept_emails: bool = Field(default=False)
    status: str = Field(default="pending", max_length=20, index=True)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Payment(SQLModel, table=True):
    """Intenção de pagamento criada no checkout (Stripe ou gateway simulado)."""

    __tablename__ = "payments"

    id: Optional[int] = Field(default=None, primary_key=True)
    provider: str = Field(default="mock", max_length=20, index=True)
    provider_payment_id: str = Field(max_length=255, unique=True, index=True)
    plan_id: str = Field(max_length=32)
    method: str = Field(max_length=10)  # card, pix, boleto
    amount: int = Field(description="Valor em centavos")
    currency: str = Field(default="brl", max_length=3)
    status: str = Field(default="pending", max_length=20, index=True)
    client_secret: Optional[str] = Field(default=None, max_length=255)
    account_type: str = Field(max_length=20)
    account_id: int = Field(index=True)
    memorial_id: Optional[int] = Field(default=None, foreign_key="memorials.id")
    pix_code: Optional[str] = Field(default=None, sa_column=Column(Text))
    boleto_url: Optional[str] = Field(default=None, sa_column=Column(Text))
    boleto_barcode: Optional[str] = Field(default=None, max_length=255)
    expires_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    failure_code: Optional[str] = Field(default=None, max_length=64)
    paid_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    raw_payload: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Order(SQLModel, table=True):
    """Pedido de produção da placa física de um memorial."""

    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    memorial_id: int = Field(foreign_key="memorials.id", index=True)
    funeral_home_id: Optional[int] = Field(
        default=None, foreign_key="funeral_homes.id", index=True
    )
    family_user_id: Optional[int] = Field(default=None, foreign_key="family_users.id")
    payment_id: Optional[int] = Field(
        default=None, foreign_key="payments.id", unique=True
    )
    production_status: str = Field(default="new", max_length=20, index=True)
    priority: str = Field(default="normal", max_length=10)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))
    internal_notes: Optional[str] = Field(default=None, sa_column=Column(Text))
    estimated_delivery: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    delivered_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    assigned_to: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class OrderHistory(SQLModel, table=True):
    __tablename__ = "order_history"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    previous_status: Optional[str] = Field(default=None, max_length=20)
    new_status: str = Field(max_length=20)
    changed_by: str = Field(max_length=255)
    notes: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
