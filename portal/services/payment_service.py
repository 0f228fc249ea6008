"""
Service de Pagamentos: catálogo de planos, intenções de pagamento
(cartão, PIX, boleto), confirmação no gateway simulado, eventos do Stripe
e abertura do pedido de produção após o pagamento.
"""

import logging
import re
from typing import Any, Optional

import orjson
from sqlalchemy.ext.asyncio import AsyncSession

from portal.config.constants import (
    PLANS,
    CardRules,
    PaymentMethod,
    PaymentStatus,
    Plan,
    ProductionStatus,
)
from portal.config.exceptions import (
    NotFoundError,
    PaymentDeclinedError,
    PermissionDeniedError,
    ValidationError,
)
from portal.config.settings import settings
from portal.domain.commerce_models import Order, OrderHistory, Payment
from portal.domain.models import Principal
from portal.infrastructure.payment_gateway import MockGateway, PaymentGateway, get_payment_gateway
from portal.infrastructure.repositories.commerce_repository import OrderRepository, PaymentRepository
from portal.infrastructure.repositories.memorial_repository import MemorialRepository
from portal.presentation.schemas.commerce_schemas import PaymentIntentCreate
from portal.services.memorial_service import MEMORIAL_NOT_FOUND, can_manage_memorial
from portal.utils.dates import utcnow
from portal.utils.formatting import format_price
from portal.utils.qr_codes import generate_qr_code

logger = logging.getLogger("service.payments")

SYSTEM_ACTOR = "system"

# Eventos do Stripe tratados pelo webhook -> status resultante
STRIPE_EVENT_STATUS = {
    "payment_intent.succeeded": PaymentStatus.SUCCEEDED,
    "payment_intent.payment_failed": PaymentStatus.FAILED,
    "payment_intent.canceled": PaymentStatus.CANCELED,
}

_NON_DIGITS = re.compile(r"\D")


def list_plans() -> list[Plan]:
    return list(PLANS)


def get_plan(plan_id: str) -> Plan:
    for plan in PLANS:
        if plan.id == plan_id:
            return plan
    raise NotFoundError("Plano", plan_id, message="Plano não encontrado.", code="PLAN_NOT_FOUND")


def plan_to_dict(plan: Plan) -> dict[str, Any]:
    return {
        "id": plan.id,
        "name": plan.name,
        "description": plan.description,
        "price_cents": plan.price_cents,
        "price_formatted": format_price(plan.price_cents, plan.currency),
        "currency": plan.currency,
        "interval": plan.interval,
        "features": list(plan.features),
        "popular": plan.popular,
    }


def payment_to_dict(payment: Payment, pix_qr_code: Optional[str] = None) -> dict[str, Any]:
    """Serializa o pagamento; o QR do PIX é regerado a partir do código copia e cola."""
    if pix_qr_code is None and payment.pix_code and payment.status == PaymentStatus.PENDING.value:
        pix_qr_code = generate_qr_code(payment.pix_code, "png", scale=6)
    return {
        "id": payment.id,
        "provider": payment.provider,
        "provider_payment_id": payment.provider_payment_id,
        "plan_id": payment.plan_id,
        "method": payment.method,
        "amount": payment.amount,
        "amount_formatted": format_price(payment.amount),
        "currency": payment.currency,
        "status": payment.status,
        "client_secret": payment.client_secret,
        "memorial_id": payment.memorial_id,
        "pix_code": payment.pix_code,
        "pix_qr_code": pix_qr_code,
        "boleto_url": payment.boleto_url,
        "boleto_barcode": payment.boleto_barcode,
        "expires_at": payment.expires_at,
        "failure_code": payment.failure_code,
        "paid_at": payment.paid_at,
        "created_at": payment.created_at,
    }


class PaymentService:
    def __init__(self, session: AsyncSession, gateway: Optional[PaymentGateway] = None):
        self.session = session
        self.gateway = gateway or get_payment_gateway()
        self.payments = PaymentRepository(session)
        self.orders = OrderRepository(session)
        self.memorials = MemorialRepository(session)

    # ─── Checkout ──────────────────────────────────────────────────────────

    async def create_payment_intent(
        self, data: PaymentIntentCreate, principal: Principal
    ) -> tuple[Payment, Optional[str]]:
        """
        Cria a intenção no gateway e persiste o pagamento como pendente.

        Returns:
            (pagamento, imagem do QR PIX quando o gateway fornece)
        """
        plan = get_plan(data.plan_id)
        if plan.price_cents <= 0:
            raise ValidationError(
                "O plano gratuito não requer pagamento.", field="plan_id", code="FREE_PLAN"
            )

        if data.memorial_id is not None:
            memorial = await self.memorials.get_by_id(data.memorial_id)
            if memorial is None:
                raise NotFoundError("Memorial", data.memorial_id, message=MEMORIAL_NOT_FOUND)
            if not can_manage_memorial(principal, memorial):
                raise PermissionDeniedError("Você não tem permissão para gerenciar este memorial")

        method = PaymentMethod(data.payment_method)
        currency = settings.billing.currency
        intent = await self.gateway.create_intent(
            plan.price_cents,
            currency,
            method,
            metadata={
                "plan_id": plan.id,
                "account": principal.subject,
                "memorial_id": data.memorial_id,
            },
        )

        payment = await self.payments.create(
            Payment(
                provider=intent.provider,
                provider_payment_id=intent.provider_payment_id,
                plan_id=plan.id,
                method=method.value,
                amount=plan.price_cents,
                currency=currency,
                status=PaymentStatus.PENDING.value,
                client_secret=intent.client_secret,
                account_type=principal.account_type.value,
                account_id=principal.account_id,
                memorial_id=data.memorial_id,
                pix_code=intent.pix_code,
                boleto_url=intent.boleto_url,
                boleto_barcode=intent.boleto_barcode,
                expires_at=intent.expires_at,
                raw_payload=orjson.dumps(intent.raw, default=str).decode("utf-8"),
            )
        )
        await self.session.commit()
        logger.info(
            "Pagamento criado: id=%s provider=%s plan=%s method=%s amount=%s",
            payment.id,
            payment.provider,
            plan.id,
            method.value,
            payment.amount,
        )
        return payment, intent.pix_qr_code

    async def get_payment(self, payment_id: int, principal: Principal) -> Payment:
        payment = await self.payments.get_by_id(payment_id)
        owned = payment is not None and (
            principal.is_admin
            or (
                payment.account_type == principal.account_type.value
                and payment.account_id == principal.account_id
            )
        )
        if not owned:
            raise NotFoundError("Pagamento", payment_id, message="Pagamento não encontrado")
        return payment

    async def payment_history(self, principal: Principal) -> list[Payment]:
        return await self.payments.list_for_account(
            principal.account_type.value, principal.account_id
        )

    # ─── Confirmação (gateway simulado) ────────────────────────────────────

    def _ensure_confirmable(self, payment: Payment, method: PaymentMethod) -> None:
        if payment.provider != MockGateway.provider:
            raise ValidationError(
                "Confirmação direta disponível apenas no ambiente de testes.",
                code="PROVIDER_CONFIRMATION_REQUIRED",
            )
        if payment.method != method.value:
            raise ValidationError(
                "Método de pagamento não corresponde à intenção.",
                field="payment_method",
                code="INVALID_PAYMENT_METHOD",
            )
        if payment.status == PaymentStatus.CANCELED.value:
            raise ValidationError("Pagamento cancelado.", code="PAYMENT_CANCELED")

    async def confirm_card_payment(
        self, payment_id: int, card_number: str, principal: Principal
    ) -> Payment:
        """
        Simula a autorização do cartão.

        Regras do gateway simulado:
        - 13 a 19 dígitos, senão INVALID_CARD_NUMBER
        - final 0000: CARD_DECLINED; final 9999: INSUFFICIENT_FUNDS
        """
        payment = await self.get_payment(payment_id, principal)
        self._ensure_confirmable(payment, PaymentMethod.CARD)
        if payment.status == PaymentStatus.SUCCEEDED.value:
            return payment

        digits = _NON_DIGITS.sub("", card_number or "")
        if not CardRules.MIN_DIGITS <= len(digits) <= CardRules.MAX_DIGITS:
            raise ValidationError(
                "Número do cartão inválido.", field="card_number", code="INVALID_CARD_NUMBER"
            )

        if digits.endswith(CardRules.DECLINED_SUFFIX):
            await self._decline(payment, "CARD_DECLINED", "Cartão recusado.")
        if digits.endswith(CardRules.INSUFFICIENT_FUNDS_SUFFIX):
            await self._decline(payment, "INSUFFICIENT_FUNDS", "Saldo insuficiente.")

        payment = await self.mark_succeeded(payment)
        await self.session.commit()
        return payment

    async def _decline(self, payment: Payment, code: str, message: str) -> None:
        payment.status = PaymentStatus.FAILED.value
        payment.failure_code = code
        await self.payments.save(payment)
        # Persiste a falha antes de propagar o 402
        await self.session.commit()
        logger.warning("Pagamento recusado: id=%s code=%s", payment.id, code)
        raise PaymentDeclinedError(message, code)

    async def confirm_pix_payment(self, payment_id: int, principal: Principal) -> Payment:
        payment = await self.get_payment(payment_id, principal)
        self._ensure_confirmable(payment, PaymentMethod.PIX)
        payment = await self.mark_succeeded(payment)
        await self.session.commit()
        return payment

    # ─── Liquidação ────────────────────────────────────────────────────────

    async def mark_succeeded(self, payment: Payment) -> Payment:
        """Marca como pago e abre o pedido de produção. Idempotente."""
        if payment.status != PaymentStatus.SUCCEEDED.value:
            payment.status = PaymentStatus.SUCCEEDED.value
            payment.failure_code = None
            payment.paid_at = utcnow()
            payment = await self.payments.save(payment)
            logger.info("Pagamento confirmado: id=%s provider=%s", payment.id, payment.provider)
        await self._fulfil(payment)
        return payment

    async def _fulfil(self, payment: Payment) -> Optional[Order]:
        if payment.memorial_id is None:
            return None
        existing = await self.orders.get_by_payment_id(payment.id)
        if existing is not None:
            return existing

        memorial = await self.memorials.get_by_id(payment.memorial_id)
        if memorial is None:
            logger.warning(
                "Pagamento %s referencia memorial inexistente: %s", payment.id, payment.memorial_id
            )
            return None

        order = await self.orders.create(
            Order(
                memorial_id=memorial.id,
                funeral_home_id=memorial.funeral_home_id,
                family_user_id=memorial.family_user_id,
                payment_id=payment.id,
                notes=f"Plano {get_plan(payment.plan_id).name}",
            )
        )
        await self.orders.add_history(
            OrderHistory(
                order_id=order.id,
                previous_status=None,
                new_status=ProductionStatus.NEW.value,
                changed_by=SYSTEM_ACTOR,
                notes=f"Pedido criado a partir do pagamento {payment.provider_payment_id}",
            )
        )
        logger.info("Pedido de produção aberto: order=%s payment=%s", order.id, payment.id)
        return order

    # ─── Webhook Stripe ────────────────────────────────────────────────────

    async def process_stripe_event(self, event: dict[str, Any]) -> dict[str, Any]:
        event_type = str(event.get("type") or "")
        target_status = STRIPE_EVENT_STATUS.get(event_type)
        if target_status is None:
            logger.info("Evento Stripe ignorado: %s", event_type)
            return {"processed": False, "ignored_event": event_type}

        data = event.get("data") or {}
        intent = data.get("object") if isinstance(data, dict) else None
        intent_id = intent.get("id") if isinstance(intent, dict) else None
        if not intent_id:
            raise ValidationError("Evento sem payment intent", field="data.object.id")

        payment = await self.payments.get_by_provider_id(str(intent_id))
        if payment is None:
            logger.warning("Evento %s para intent desconhecido: %s", event_type, intent_id)
            return {"processed": False, "reason": "payment_not_found", "event": event_type}

        if target_status == PaymentStatus.SUCCEEDED:
            payment = await self.mark_succeeded(payment)
        elif payment.status != PaymentStatus.SUCCEEDED.value:
            payment.status = target_status.value
            if target_status == PaymentStatus.FAILED:
                last_error = intent.get("last_payment_error")
                if not isinstance(last_error, dict):
                    last_error = {}
                payment.failure_code = str(last_error.get("code") or "payment_failed")
            payment = await self.payments.save(payment)
            logger.info("Pagamento %s: id=%s", target_status.value, payment.id)

        await self.session.commit()
        return {
            "processed": True,
            "event": event_type,
            "payment_id": payment.id,
            "status": payment.status,
        }
