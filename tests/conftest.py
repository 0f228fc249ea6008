import os
import sys

import pytest
from fastapi.testclient import TestClient

# Ensure the project root is in path for imports to work
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from portal.config.settings import settings
from portal.domain.sqlmodels import AdminUser
from portal.infrastructure import db_engine
from portal.infrastructure.redis_client import redis_cache
from portal.infrastructure.repositories.account_repository import AdminUserRepository
from portal.server.app import app
from portal.server.rate_limit import dedication_rate_limiter, login_rate_limiter
from portal.services import memorial_service
from portal.utils.passwords import hash_password

sys.path.insert(0, os.path.dirname(__file__))

from helpers import ADMIN_EMAIL, DEFAULT_PASSWORD, auth_headers, run_in_session  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Banco SQLite temporário por teste, sem Redis e sem Stripe."""
    monkeypatch.setattr(settings.database, "engine", "sqlite")
    monkeypatch.setattr(settings.database, "filename", str(tmp_path / "portal.db"))
    monkeypatch.setattr(db_engine, "_engine", None)

    monkeypatch.setattr(settings.cache, "enable_redis", False)
    monkeypatch.setattr(redis_cache, "enabled", False)
    monkeypatch.setattr(redis_cache, "_client", None)

    monkeypatch.setattr(settings.billing, "stripe_secret_key", None)
    monkeypatch.setattr(settings.billing, "stripe_webhook_secret", None)
    monkeypatch.setattr(settings.server, "env", "development")

    monkeypatch.setattr(settings.auth, "secret_key", "test-secret-key-with-enough-entropy-0123456789")
    monkeypatch.setattr(settings.auth, "secret_key_previous", "")
    monkeypatch.setattr(settings.auth, "bcrypt_rounds", 4)

    login_rate_limiter.reset()
    dedication_rate_limiter.reset()
    memorial_service._public_list_cache.clear()
    yield
    login_rate_limiter.reset()
    dedication_rate_limiter.reset()
    memorial_service._public_list_cache.clear()


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


def _login(client: TestClient, path: str, email: str, password: str) -> dict:
    response = client.post(path, json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    # Cada teste escolhe a conta pelo header; o cookie não deve vazar
    client.cookies.clear()
    return auth_headers(response.json()["token"])


@pytest.fixture()
def register_funeral_home(client):
    def _register(email: str = "contato@funeraria.test", name: str = "Funerária Paz",
                  password: str = DEFAULT_PASSWORD) -> dict:
        response = client.post(
            "/api/auth/funeral-homes/register",
            json={"name": name, "email": email, "password": password, "phone": "81999990000"},
        )
        assert response.status_code == 201, response.text
        client.cookies.clear()
        body = response.json()
        return {"id": body["account"]["id"], "headers": auth_headers(body["token"])}

    return _register


@pytest.fixture()
def funeral_home(register_funeral_home):
    return register_funeral_home()


@pytest.fixture()
def admin_headers(client):
    async def _create(session):
        await AdminUserRepository(session).create(
            AdminUser(email=ADMIN_EMAIL, name="Equipe Portal", password_hash=hash_password(DEFAULT_PASSWORD))
        )

    run_in_session(client, _create)
    return _login(client, "/api/auth/admin/login", ADMIN_EMAIL, DEFAULT_PASSWORD)


@pytest.fixture()
def create_memorial(client, funeral_home):
    def _create(headers: dict | None = None, **overrides) -> dict:
        payload = {
            "full_name": "José da Silva",
            "family_email": "familia@silva.test",
            "family_name": "Maria da Silva",
            "birth_date": "1940-03-12",
            "death_date": "2024-01-05",
            "birthplace": "Recife, PE",
            "biography": "Pescador em Itamaracá, contador de histórias.",
        }
        payload.update(overrides)
        response = client.post("/api/memorials", json=payload, headers=headers or funeral_home["headers"])
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture()
def family_login(client):
    """Aceita o convite da família e devolve os headers da sessão."""

    def _accept(invitation_token: str, password: str = DEFAULT_PASSWORD) -> dict:
        response = client.post(
            "/api/auth/family/accept-invitation",
            json={"token": invitation_token, "password": password},
        )
        assert response.status_code == 200, response.text
        client.cookies.clear()
        return auth_headers(response.json()["token"])

    return _accept
