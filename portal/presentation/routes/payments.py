"""
Endpoints do checkout: planos, criação de intenção de pagamento,
confirmação (gateway simulado) e histórico da conta.
"""

import logging

from fastapi import APIRouter, Depends, status

from portal.domain.models import Principal
from portal.presentation.schemas.commerce_schemas import (
    CardPaymentIn,
    PaymentIntentCreate,
    PaymentOut,
    PaymentResultOut,
    PlanOut,
)
from portal.server.dependencies import get_payment_service, require_principal
from portal.services.payment_service import (
    PaymentService,
    list_plans,
    payment_to_dict,
    plan_to_dict,
)

logger = logging.getLogger("routes.payments")

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("/plans", response_model=list[PlanOut])
async def get_plans():
    """Catálogo público de planos."""
    return [plan_to_dict(plan) for plan in list_plans()]


@router.post("/intents", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
async def create_payment_intent(
    payload: PaymentIntentCreate,
    principal: Principal = Depends(require_principal),
    service: PaymentService = Depends(get_payment_service),
):
    payment, pix_qr_code = await service.create_payment_intent(payload, principal)
    return payment_to_dict(payment, pix_qr_code)


@router.get("/history", response_model=list[PaymentOut])
async def payment_history(
    principal: Principal = Depends(require_principal),
    service: PaymentService = Depends(get_payment_service),
):
    payments = await service.payment_history(principal)
    return [payment_to_dict(payment) for payment in payments]


@router.get("/{payment_id}", response_model=PaymentOut)
async def get_payment(
    payment_id: int,
    principal: Principal = Depends(require_principal),
    service: PaymentService = Depends(get_payment_service),
):
    return payment_to_dict(await service.get_payment(payment_id, principal))


@router.post("/{payment_id}/confirm-card", response_model=PaymentResultOut)
async def confirm_card_payment(
    payment_id: int,
    payload: CardPaymentIn,
    principal: Principal = Depends(require_principal),
    service: PaymentService = Depends(get_payment_service),
):
    payment = await service.confirm_card_payment(payment_id, payload.card_number, principal)
    return {
        "success": True,
        "message": "Pagamento aprovado.",
        "payment": payment_to_dict(payment),
    }


@router.post("/{payment_id}/confirm-pix", response_model=PaymentResultOut)
async def confirm_pix_payment(
    payment_id: int,
    principal: Principal = Depends(require_principal),
    service: PaymentService = Depends(get_payment_service),
):
    payment = await service.confirm_pix_payment(payment_id, principal)
    return {
        "success": True,
        "message": "Pagamento PIX confirmado.",
        "payment": payment_to_dict(payment),
    }
