"""
Gateways de pagamento.

- StripeGateway: cria PaymentIntents via API REST do Stripe (httpx, form-encoded)
- MockGateway: usado quando BILLING__STRIPE_SECRET_KEY não está configurada;
  devolve intents simuladas com dados de PIX/boleto para desenvolvimento.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Protocol

import httpx

from portal.config.constants import PaymentMethod
from portal.config.exceptions import PaymentProviderError, ValidationError
from portal.config.logging_config import get_logger
from portal.config.settings import settings
from portal.utils.dates import from_unix_timestamp, utcnow
from portal.utils.pix import build_pix_payload
from portal.utils.qr_codes import generate_qr_code

logger = get_logger("payments.gateway")


@dataclass
class GatewayIntent:
    """Resultado normalizado da criação de uma intenção de pagamento."""

    provider: str
    provider_payment_id: str
    status: str
    client_secret: Optional[str] = None
    pix_code: Optional[str] = None
    pix_qr_code: Optional[str] = None
    boleto_url: Optional[str] = None
    boleto_barcode: Optional[str] = None
    expires_at: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict)


class PaymentGateway(Protocol):
    provider: str

    async def create_intent(
        self,
        amount_cents: int,
        currency: str,
        method: PaymentMethod,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> GatewayIntent: ...


def _ensure_positive_amount(amount_cents: Any) -> int:
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents <= 0:
        raise ValidationError("O valor deve ser um número positivo", field="amount")
    return amount_cents


class StripeGateway:
    provider = "stripe"

    def __init__(
        self,
        secret_key: str,
        api_base: str = "https://api.stripe.com/v1",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._secret_key = secret_key
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @staticmethod
    def _build_form(
        amount_cents: int,
        currency: str,
        method: PaymentMethod,
        metadata: Optional[Dict[str, Any]],
    ) -> Dict[str, str]:
        form = {"amount": str(amount_cents), "currency": currency.lower()}
        if method == PaymentMethod.CARD:
            form["automatic_payment_methods[enabled]"] = "true"
        else:
            form["payment_method_types[]"] = method.value
        for key, value in (metadata or {}).items():
            if value is not None:
                form[f"metadata[{key}]"] = str(value)
        return form

    @staticmethod
    def _parse_intent(payload: Dict[str, Any]) -> GatewayIntent:
        next_action = payload.get("next_action") or {}
        pix = next_action.get("pix_display_qr_code") or {}
        boleto = next_action.get("boleto_display_details") or {}
        return GatewayIntent(
            provider="stripe",
            provider_payment_id=str(payload.get("id") or ""),
            status=str(payload.get("status") or "requires_payment_method"),
            client_secret=payload.get("client_secret"),
            pix_code=pix.get("data"),
            pix_qr_code=pix.get("image_url_png"),
            boleto_url=boleto.get("hosted_voucher_url"),
            boleto_barcode=boleto.get("number"),
            expires_at=from_unix_timestamp(pix.get("expires_at") or boleto.get("expires_at")),
            raw=payload,
        )

    async def create_intent(
        self,
        amount_cents: int,
        currency: str,
        method: PaymentMethod,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> GatewayIntent:
        amount_cents = _ensure_positive_amount(amount_cents)
        form = self._build_form(amount_cents, currency, method, metadata)

        try:
            async with httpx.AsyncClient(
                base_url=self._api_base,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    "/payment_intents",
                    data=form,
                    headers={"Authorization": f"Bearer {self._secret_key}"},
                )
        except httpx.HTTPError as exc:
            logger.error("Stripe indisponível: %s", exc)
            raise PaymentProviderError(f"Stripe request failed: {exc}") from exc

        if not response.is_success:
            logger.warning("Stripe recusou a criação do intent: status=%s", response.status_code)
            raise PaymentProviderError(
                f"Stripe request failed: {response.status_code} {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise PaymentProviderError("Stripe request failed: invalid JSON response") from exc

        intent = self._parse_intent(payload)
        if not intent.provider_payment_id:
            raise PaymentProviderError("Stripe request failed: missing payment intent id")
        logger.info("Stripe intent criado: id=%s method=%s", intent.provider_payment_id, method.value)
        return intent


class MockGateway:
    """Gateway simulado: nenhum dinheiro é movimentado."""

    provider = "mock"

    @staticmethod
    def _boleto_barcode(amount_cents: int) -> str:
        return f"23793.38128 60000.000003 00000.000400 1 8434{amount_cents:010d}"

    async def create_intent(
        self,
        amount_cents: int,
        currency: str,
        method: PaymentMethod,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> GatewayIntent:
        amount_cents = _ensure_positive_amount(amount_cents)
        intent_id = f"pi_mock_{secrets.token_hex(12)}"
        intent = GatewayIntent(
            provider=self.provider,
            provider_payment_id=intent_id,
            status="requires_payment_method",
            client_secret=f"{intent_id}_secret_{secrets.token_hex(8)}",
        )

        billing = settings.billing
        if method == PaymentMethod.PIX:
            intent.pix_code = build_pix_payload(
                pix_key=billing.pix_key,
                amount_cents=amount_cents,
                merchant_name=billing.merchant_name,
                merchant_city=billing.merchant_city,
                txid=intent_id,
            )
            intent.pix_qr_code = generate_qr_code(intent.pix_code, "png", scale=6)
            intent.expires_at = utcnow() + timedelta(minutes=billing.pix_expiry_minutes)
        elif method == PaymentMethod.BOLETO:
            base_url = settings.server.public_base_url.rstrip("/")
            intent.boleto_url = f"{base_url}/boleto/{intent_id}"
            intent.boleto_barcode = self._boleto_barcode(amount_cents)
            intent.expires_at = utcnow() + timedelta(days=billing.boleto_expiry_days)

        intent.raw = {
            "id": intent_id,
            "amount": amount_cents,
            "currency": currency.lower(),
            "status": intent.status,
            "payment_method_types": [method.value],
            "metadata": {k: str(v) for k, v in (metadata or {}).items() if v is not None},
        }
        logger.info("Mock intent criado: id=%s method=%s amount=%s", intent_id, method.value, amount_cents)
        return intent


def get_payment_gateway() -> PaymentGateway:
    """Stripe quando há chave secreta configurada; caso contrário, gateway simulado."""
    billing = settings.billing
    if billing.uses_stripe:
        return StripeGateway(
            secret_key=billing.stripe_secret_key or "",
            api_base=billing.stripe_api_base,
            timeout=billing.stripe_timeout_seconds,
        )
    return MockGateway()


def verify_stripe_signature(
    payload: bytes,
    signature_header: Optional[str],
    secret: str,
    tolerance_seconds: int = 300,
    now: Optional[float] = None,
) -> bool:
    """
    Valida o header Stripe-Signature (t=<timestamp>,v1=<hmac_sha256>).

    A assinatura é HMAC-SHA256 de "<timestamp>.<payload>" com o segredo
    do endpoint; timestamps fora da tolerância são rejeitados.
    """
    if not signature_header or not secret:
        return False

    timestamp: Optional[str] = None
    signatures: list[str] = []
    for part in signature_header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1" and value:
            signatures.append(value)

    if not timestamp or not timestamp.isdigit() or not signatures:
        return False

    current = time.time() if now is None else now
    if abs(current - int(timestamp)) > tolerance_seconds:
        return False

    signed_payload = timestamp.encode("utf-8") + b"." + payload
    expected = hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()
    return any(hmac.compare_digest(expected, candidate) for candidate in signatures)
