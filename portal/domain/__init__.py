"""Modelos de domínio. Importar este pacote registra todas as tabelas no metadata."""

from .commerce_models import Lead, Order, OrderHistory, Payment
from .sqlmodels import (
    AdminUser,
    Dedication,
    Descendant,
    FamilyUser,
    FuneralHome,
    Memorial,
    Photo,
)

__all__ = [
    "AdminUser",
    "Dedication",
    "Descendant",
    "FamilyUser",
    "FuneralHome",
    "Lead",
    "Memorial",
    "Order",
    "OrderHistory",
    "Payment",
    "Photo",
]
