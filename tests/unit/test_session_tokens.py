import jwt
import pytest

from portal.config.constants import AccountType
from portal.domain.models import Principal
from portal.server import middleware

pytestmark = pytest.mark.unit

FUNERAL = Principal(AccountType.FUNERAL_HOME, 12, "Funerária Paz", "contato@paz.test")
ADMIN = Principal(AccountType.ADMIN, 1, "Equipe", "admin@portal.test")


def test_token_round_trip_restores_principal():
    token = middleware.create_session_token(FUNERAL)
    assert middleware.decode_session_token(token) == FUNERAL


def test_admin_session_uses_hour_based_ttl(monkeypatch):
    monkeypatch.setattr(middleware.settings.auth, "admin_session_ttl_hours", 24)
    monkeypatch.setattr(middleware.settings.auth, "session_ttl_days", 365)

    assert middleware.session_ttl_seconds(AccountType.ADMIN) == 24 * 3600
    assert middleware.session_ttl_seconds(AccountType.FAMILY_USER) == 365 * 86400

    token = middleware.create_session_token(ADMIN, now=1_000)
    payload = jwt.decode(token, options={"verify_signature": False})
    assert payload["sub"] == "admin-1"
    assert payload["type"] == "admin"
    assert payload["exp"] - payload["iat"] == 24 * 3600


def test_expired_token_is_rejected():
    token = middleware.create_session_token(FUNERAL, now=1_000)
    assert middleware.decode_session_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    forged = jwt.encode(
        {"sub": "admin-1", "type": "admin", "iss": "portal-da-lembranca", "iat": 1, "exp": 4_000_000_000},
        "outra-chave",
        algorithm="HS256",
    )
    assert middleware.decode_session_token(forged) is None


def test_previous_key_still_validates_after_rotation(monkeypatch):
    old_key = middleware.settings.auth.secret_key
    token = middleware.create_session_token(FUNERAL)

    monkeypatch.setattr(middleware.settings.auth, "secret_key", "chave-nova-0123456789-abcdefghijklmnop")
    monkeypatch.setattr(middleware.settings.auth, "secret_key_previous", old_key)

    assert middleware.decode_session_token(token) == FUNERAL


def test_type_mismatch_between_sub_and_claim_is_rejected():
    token = jwt.encode(
        {
            "sub": "family-3",
            "type": "admin",
            "iss": "portal-da-lembranca",
            "iat": 1,
            "exp": 4_000_000_000,
        },
        middleware.settings.auth.secret_key,
        algorithm="HS256",
    )
    assert middleware.decode_session_token(token) is None


@pytest.mark.parametrize("token", [None, "", "nao-e-um-jwt"])
def test_missing_or_malformed_token_returns_none(token):
    assert middleware.decode_session_token(token) is None


def test_extract_token_prefers_bearer_over_cookie():
    scope = {
        "headers": [
            (b"authorization", b"Bearer header-token"),
            (b"cookie", f"{middleware.settings.auth.session_cookie_name}=cookie-token".encode()),
        ]
    }
    assert middleware.SessionMiddleware._extract_token(scope) == "header-token"


def test_extract_token_reads_session_cookie():
    scope = {"headers": [(b"cookie", f"tema=escuro; {middleware.settings.auth.session_cookie_name}=abc".encode())]}
    assert middleware.SessionMiddleware._extract_token(scope) == "abc"


@pytest.mark.asyncio
async def test_middleware_publishes_principal_for_api_routes():
    token = middleware.create_session_token(FUNERAL)
    seen = {}

    async def app(scope, receive, send):
        seen["state"] = scope.get("state", {}).get("principal")
        seen["ctx"] = middleware.get_current_principal()

    wrapped = middleware.SessionMiddleware(app)
    scope = {
        "type": "http",
        "path": "/api/memorials",
        "method": "GET",
        "headers": [(b"authorization", f"Bearer {token}".encode())],
    }
    await wrapped(scope, None, None)

    assert seen["state"] == FUNERAL
    assert seen["ctx"] == FUNERAL
    assert middleware.get_current_principal() is None


@pytest.mark.asyncio
async def test_middleware_skips_non_api_paths():
    seen = {}

    async def app(scope, receive, send):
        seen["state"] = scope.get("state")

    await middleware.SessionMiddleware(app)({"type": "http", "path": "/sitemap.xml", "headers": []}, None, None)
    assert seen["state"] is None
