import logging

import orjson
from fastapi import APIRouter, Depends, HTTPException, Request

from portal.config.settings import settings
from portal.infrastructure.payment_gateway import verify_stripe_signature
from portal.server.dependencies import get_payment_service
from portal.services.payment_service import PaymentService

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])
logger = logging.getLogger("routes.webhooks")


def _check_signature(raw_body: bytes, request: Request) -> None:
    """
    Valida Stripe-Signature quando há segredo configurado.

    Sem segredo, eventos só são aceitos em desenvolvimento.
    """
    secret = settings.billing.stripe_webhook_secret
    if not secret:
        if settings.server.env == "development":
            logger.warning("Webhook Stripe sem segredo configurado: assinatura não verificada")
            return
        raise HTTPException(status_code=401, detail="Webhook secret not configured")

    if not verify_stripe_signature(
        raw_body,
        request.headers.get("stripe-signature"),
        secret,
        tolerance_seconds=settings.billing.stripe_signature_tolerance_seconds,
    ):
        raise HTTPException(status_code=401, detail="Invalid Stripe signature")


@router.post(
    "/stripe",
    responses={
        400: {"description": "Invalid JSON payload or missing event type"},
        401: {"description": "Invalid Stripe signature"},
        413: {"description": "Payload too large"},
    },
)
async def stripe_webhook(
    request: Request,
    service: PaymentService = Depends(get_payment_service),
):
    max_payload = max(1, int(settings.billing.stripe_max_payload_bytes))
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        if int(content_length) > max_payload:
            raise HTTPException(status_code=413, detail="Payload too large")

    raw_body = await request.body()
    if len(raw_body) > max_payload:
        raise HTTPException(status_code=413, detail="Payload too large")

    _check_signature(raw_body, request)

    try:
        payload = orjson.loads(raw_body)
    except orjson.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid JSON payload")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid webhook payload")

    event_type = str(payload.get("type") or "").strip()
    if not event_type:
        raise HTTPException(status_code=400, detail="Missing event type in payload")

    result = await service.process_stripe_event(payload)
    return {"success": True, **result}
