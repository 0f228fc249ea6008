import pytest

from portal.config.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    PaymentDeclinedError,
    PaymentProviderError,
    PermissionDeniedError,
    PortalError,
    ServiceError,
    ValidationError,
)

pytestmark = pytest.mark.unit


def test_portal_error_defaults():
    exc = PortalError("oops")
    assert exc.message == "oops"
    assert exc.code == "PORTAL_ERROR"
    assert exc.status_code == 500


@pytest.mark.parametrize(
    "exc, status_code, code",
    [
        (ConfigurationError("bad config"), 500, "CONFIG_ERROR"),
        (DatabaseError("db down"), 503, "DB_ERROR"),
        (ValidationError("invalid"), 400, "VALIDATION_ERROR"),
        (AuthenticationError(), 401, "UNAUTHORIZED"),
        (PermissionDeniedError(), 403, "FORBIDDEN"),
        (NotFoundError("Memorial", 7), 404, "NOT_FOUND"),
        (ConflictError("E-mail já registrado", field="email"), 409, "CONFLICT"),
        (PaymentDeclinedError("Cartão recusado."), 402, "CARD_DECLINED"),
        (PaymentProviderError("Stripe request failed"), 502, "PAYMENT_PROVIDER_ERROR"),
        (ServiceError("boom"), 500, "SERVICE_ERROR"),
    ],
)
def test_exception_status_and_code_contract(exc, status_code, code):
    assert isinstance(exc, PortalError)
    assert exc.status_code == status_code
    assert exc.code == code


def test_not_found_builds_default_message():
    exc = NotFoundError("Memorial", "joaquim-nabuco")
    assert exc.message == "Memorial 'joaquim-nabuco' não encontrado"
    assert exc.resource == "Memorial"
    assert exc.identifier == "joaquim-nabuco"


def test_validation_error_accepts_custom_code():
    exc = ValidationError("Número do cartão inválido.", field="card_number", code="INVALID_CARD_NUMBER")
    assert exc.code == "INVALID_CARD_NUMBER"
    assert exc.field == "card_number"


def test_payment_declined_keeps_reason_code():
    exc = PaymentDeclinedError("Saldo insuficiente.", "INSUFFICIENT_FUNDS")
    assert exc.code == "INSUFFICIENT_FUNDS"
    assert str(exc) == "Saldo insuficiente."
