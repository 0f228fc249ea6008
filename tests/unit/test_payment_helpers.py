from datetime import datetime

import pytest

from portal.config.constants import PLANS
from portal.config.exceptions import NotFoundError
from portal.domain.commerce_models import Payment
from portal.services.payment_service import (
    STRIPE_EVENT_STATUS,
    get_plan,
    list_plans,
    payment_to_dict,
    plan_to_dict,
)
from portal.utils.pix import build_pix_payload

pytestmark = pytest.mark.unit


def test_plan_catalog_has_free_premium_and_family():
    assert [plan.id for plan in list_plans()] == ["basic", "premium", "family"]
    assert get_plan("basic").price_cents == 0
    assert get_plan("premium").popular is True
    assert get_plan("family").interval == "year"


def test_unknown_plan_raises_plan_not_found():
    with pytest.raises(NotFoundError) as exc_info:
        get_plan("platinum")
    assert exc_info.value.code == "PLAN_NOT_FOUND"
    assert exc_info.value.message == "Plano não encontrado."


def test_plan_to_dict_formats_price():
    data = plan_to_dict(get_plan("premium"))
    assert data["price_formatted"] == "R$ 99,90"
    assert data["features"] == list(PLANS[1].features)


def _payment(**overrides) -> Payment:
    data = {
        "id": 1,
        "provider": "mock",
        "provider_payment_id": "pi_mock_1",
        "plan_id": "premium",
        "method": "pix",
        "amount": 9990,
        "currency": "brl",
        "status": "pending",
        "account_type": "funeral_home",
        "account_id": 1,
        "pix_code": build_pix_payload("chave", 9990, "Portal", "Recife", "pimock1"),
        "created_at": datetime(2026, 1, 1),
    }
    data.update(overrides)
    return Payment(**data)


def test_payment_to_dict_regenerates_pix_qr_for_pending():
    data = payment_to_dict(_payment())
    assert data["amount_formatted"] == "R$ 99,90"
    assert data["pix_qr_code"].startswith("data:image/png;base64,")


def test_payment_to_dict_omits_pix_qr_after_payment():
    assert payment_to_dict(_payment(status="succeeded"))["pix_qr_code"] is None


def test_payment_to_dict_keeps_provider_qr():
    data = payment_to_dict(_payment(), pix_qr_code="https://stripe.test/qr.png")
    assert data["pix_qr_code"] == "https://stripe.test/qr.png"


def test_only_terminal_stripe_events_are_mapped():
    assert set(STRIPE_EVENT_STATUS) == {
        "payment_intent.succeeded",
        "payment_intent.payment_failed",
        "payment_intent.canceled",
    }
