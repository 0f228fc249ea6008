import hashlib
import hmac
from urllib.parse import parse_qs

import httpx
import pytest

from portal.config.constants import PaymentMethod
from portal.config.exceptions import PaymentProviderError, ValidationError
from portal.infrastructure import payment_gateway as gateway_mod
from portal.infrastructure.payment_gateway import (
    MockGateway,
    StripeGateway,
    get_payment_gateway,
    verify_stripe_signature,
)
from portal.utils.pix import crc16_ccitt

pytestmark = pytest.mark.unit


def _stripe(handler) -> StripeGateway:
    return StripeGateway(
        secret_key="sk_test_123",
        api_base="https://stripe.test/v1",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_stripe_gateway_posts_form_and_parses_pix_intent():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["form"] = parse_qs(request.content.decode("utf-8"))
        return httpx.Response(
            200,
            json={
                "id": "pi_123",
                "status": "requires_action",
                "client_secret": "pi_123_secret",
                "next_action": {
                    "pix_display_qr_code": {
                        "data": "00020101...",
                        "image_url_png": "https://stripe.test/qr.png",
                        "expires_at": 1_700_000_000,
                    }
                },
            },
        )

    intent = await _stripe(handler).create_intent(
        9990, "BRL", PaymentMethod.PIX, metadata={"plan_id": "premium", "memorial_id": None}
    )

    assert captured["url"] == "https://stripe.test/v1/payment_intents"
    assert captured["auth"] == "Bearer sk_test_123"
    assert captured["form"]["amount"] == ["9990"]
    assert captured["form"]["currency"] == ["brl"]
    assert captured["form"]["payment_method_types[]"] == ["pix"]
    assert captured["form"]["metadata[plan_id]"] == ["premium"]
    assert "metadata[memorial_id]" not in captured["form"]

    assert intent.provider == "stripe"
    assert intent.provider_payment_id == "pi_123"
    assert intent.pix_code == "00020101..."
    assert intent.pix_qr_code == "https://stripe.test/qr.png"
    assert intent.expires_at is not None


@pytest.mark.asyncio
async def test_stripe_gateway_card_uses_automatic_payment_methods():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["form"] = parse_qs(request.content.decode("utf-8"))
        return httpx.Response(200, json={"id": "pi_card", "client_secret": "s"})

    intent = await _stripe(handler).create_intent(24990, "brl", PaymentMethod.CARD)

    assert captured["form"]["automatic_payment_methods[enabled]"] == ["true"]
    assert "payment_method_types[]" not in captured["form"]
    assert intent.status == "requires_payment_method"


@pytest.mark.asyncio
async def test_stripe_gateway_maps_http_error_to_provider_error():
    gateway = _stripe(lambda request: httpx.Response(402, json={"error": {"message": "card_declined"}}))

    with pytest.raises(PaymentProviderError) as exc_info:
        await gateway.create_intent(9990, "brl", PaymentMethod.CARD)
    assert "402" in exc_info.value.message


@pytest.mark.asyncio
async def test_stripe_gateway_maps_transport_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PaymentProviderError):
        await _stripe(handler).create_intent(9990, "brl", PaymentMethod.CARD)


@pytest.mark.asyncio
async def test_stripe_gateway_requires_intent_id():
    gateway = _stripe(lambda request: httpx.Response(200, json={"status": "requires_payment_method"}))
    with pytest.raises(PaymentProviderError):
        await gateway.create_intent(9990, "brl", PaymentMethod.CARD)


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -10, True, 99.9])
async def test_gateways_reject_non_positive_amounts(amount):
    with pytest.raises(ValidationError):
        await MockGateway().create_intent(amount, "brl", PaymentMethod.CARD)


@pytest.mark.asyncio
async def test_mock_gateway_pix_intent_has_valid_br_code():
    intent = await MockGateway().create_intent(9990, "brl", PaymentMethod.PIX, metadata={"plan_id": "premium"})

    assert intent.provider == "mock"
    assert intent.provider_payment_id.startswith("pi_mock_")
    assert intent.client_secret.startswith(intent.provider_payment_id)
    assert crc16_ccitt(intent.pix_code[:-4]) == intent.pix_code[-4:]
    assert intent.pix_qr_code.startswith("data:image/png;base64,")
    assert intent.expires_at is not None
    assert intent.raw["metadata"] == {"plan_id": "premium"}


@pytest.mark.asyncio
async def test_mock_gateway_boleto_intent_has_voucher():
    intent = await MockGateway().create_intent(24990, "brl", PaymentMethod.BOLETO)

    assert intent.boleto_url.endswith(f"/boleto/{intent.provider_payment_id}")
    assert intent.boleto_barcode.endswith("0000024990")
    assert intent.pix_code is None


def test_get_payment_gateway_selects_stripe_only_with_secret(monkeypatch):
    monkeypatch.setattr(gateway_mod.settings.billing, "stripe_secret_key", None)
    assert isinstance(get_payment_gateway(), MockGateway)

    monkeypatch.setattr(gateway_mod.settings.billing, "stripe_secret_key", "sk_live_x")
    assert isinstance(get_payment_gateway(), StripeGateway)


def _signature(payload: bytes, secret: str, timestamp: int) -> str:
    digest = hmac.new(secret.encode(), f"{timestamp}.".encode() + payload, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def test_verify_stripe_signature_accepts_valid_header():
    payload = b'{"type":"payment_intent.succeeded"}'
    header = _signature(payload, "whsec_test", 1_000)
    assert verify_stripe_signature(payload, header, "whsec_test", now=1_100) is True


def test_verify_stripe_signature_accepts_any_matching_v1():
    payload = b"{}"
    valid = _signature(payload, "whsec_test", 1_000).split(",")[1]
    header = f"t=1000,v1=deadbeef,{valid}"
    assert verify_stripe_signature(payload, header, "whsec_test", now=1_000) is True


@pytest.mark.parametrize(
    "header, now",
    [
        (None, 1_000),
        ("", 1_000),
        ("v1=abc", 1_000),
        ("t=abc,v1=abc", 1_000),
        ("t=1000", 1_000),
    ],
)
def test_verify_stripe_signature_rejects_malformed_headers(header, now):
    assert verify_stripe_signature(b"{}", header, "whsec_test", now=now) is False


def test_verify_stripe_signature_rejects_stale_timestamp_and_tampering():
    payload = b'{"id":"evt_1"}'
    header = _signature(payload, "whsec_test", 1_000)

    assert verify_stripe_signature(payload, header, "whsec_test", tolerance_seconds=300, now=1_301) is False
    assert verify_stripe_signature(b'{"id":"evt_2"}', header, "whsec_test", now=1_000) is False
    assert verify_stripe_signature(payload, header, "", now=1_000) is False
