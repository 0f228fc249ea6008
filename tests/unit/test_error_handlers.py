import json

import pytest
from sqlalchemy.exc import IntegrityError
from starlette.requests import Request

from portal.config.exceptions import NotFoundError, ServiceError, ValidationError
from portal.server import error_handlers

pytestmark = pytest.mark.unit


def _request(path: str = "/api/test") -> Request:
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "headers": [],
        "client": ("127.0.0.1", 12345),
        "server": ("testserver", 80),
    }
    return Request(scope)


def _body(response) -> dict:
    return json.loads(response.body.decode("utf-8"))


@pytest.mark.asyncio
async def test_portal_exception_handler_uses_warning_for_4xx(monkeypatch):
    calls = []
    monkeypatch.setattr(error_handlers.logger, "warning", lambda msg: calls.append(("warning", msg)))
    monkeypatch.setattr(error_handlers.logger, "error", lambda msg: calls.append(("error", msg)))

    exc = ValidationError("family_email é obrigatório", field="family_email")
    response = await error_handlers.portal_exception_handler(_request("/api/memorials"), exc)

    payload = _body(response)
    assert response.status_code == 400
    assert payload["success"] is False
    assert payload["error"]["code"] == "VALIDATION_ERROR"
    assert payload["error"]["message"] == "family_email é obrigatório"
    assert payload["error"]["details"] == {"field": "family_email"}
    assert calls and calls[0][0] == "warning"


@pytest.mark.asyncio
async def test_portal_exception_handler_uses_error_for_5xx(monkeypatch):
    calls = []
    monkeypatch.setattr(error_handlers.logger, "warning", lambda msg: calls.append(("warning", msg)))
    monkeypatch.setattr(error_handlers.logger, "error", lambda msg: calls.append(("error", msg)))

    response = await error_handlers.portal_exception_handler(
        _request("/api/memorials/slug/x/qrcode"), ServiceError("Falha ao gerar código QR", service="qrcode")
    )

    assert response.status_code == 500
    assert _body(response)["error"]["details"] == {"service": "qrcode"}
    assert calls and calls[0][0] == "error"


@pytest.mark.asyncio
async def test_not_found_details_include_resource_and_identifier():
    exc = NotFoundError("Memorial", 42, message="Memorial não encontrado")
    response = await error_handlers.portal_exception_handler(_request(), exc)

    payload = _body(response)
    assert response.status_code == 404
    assert payload["error"]["details"] == {"resource": "Memorial", "identifier": 42}


@pytest.mark.asyncio
async def test_details_are_null_when_exception_has_no_extra_attributes():
    exc = NotFoundError("Plano", message="Plano não encontrado.", code="PLAN_NOT_FOUND")
    exc.identifier = None
    exc.resource = None
    response = await error_handlers.portal_exception_handler(_request(), exc)

    assert _body(response)["error"]["details"] is None


@pytest.mark.asyncio
async def test_integrity_exception_handler_maps_to_conflict(monkeypatch):
    monkeypatch.setattr(error_handlers.logger, "warning", lambda msg: None)
    exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: memorials.slug"))

    response = await error_handlers.integrity_exception_handler(_request(), exc)

    assert response.status_code == 409
    assert _body(response)["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_generic_exception_handler_returns_sanitized_payload(monkeypatch):
    captured = []
    monkeypatch.setattr(error_handlers.logger, "exception", lambda msg: captured.append(msg))

    response = await error_handlers.generic_exception_handler(
        _request("/api/payments/intents"), RuntimeError("segredo interno /etc/passwd")
    )

    payload = _body(response)
    assert response.status_code == 500
    assert payload["error"]["code"] == "INTERNAL_ERROR"
    assert "segredo" not in payload["error"]["message"]
    assert captured
