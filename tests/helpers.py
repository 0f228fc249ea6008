"""Helpers compartilhados pelos testes (fora do conftest para import direto)."""

from datetime import timedelta

from fastapi.testclient import TestClient

from portal.domain.sqlmodels import FamilyUser, Memorial
from portal.infrastructure.db_engine import get_session
from portal.infrastructure.repositories.account_repository import FamilyUserRepository
from portal.infrastructure.repositories.memorial_repository import MemorialRepository
from portal.services import memorial_service
from portal.utils.dates import utcnow

ADMIN_EMAIL = "admin@portal.test"
DEFAULT_PASSWORD = "senha-segura"


def run_in_session(client: TestClient, operation):
    """Executa `operation(session)` no event loop da aplicação e faz commit."""

    async def _run():
        async with get_session() as session:
            return await operation(session)

    return client.portal.call(_run)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def set_memorial_fields(client: TestClient, memorial_id: int, **fields) -> None:
    async def _update(session):
        repo = MemorialRepository(session)
        memorial = await repo.get_by_id(memorial_id)
        await repo.update_fields(memorial, fields)

    run_in_session(client, _update)
    memorial_service._public_list_cache.clear()


def add_historical_memorial(client: TestClient, slug: str, full_name: str, **fields) -> int:
    async def _create(session):
        memorial = await MemorialRepository(session).create(
            Memorial(
                slug=slug,
                full_name=full_name,
                visibility="public",
                status="active",
                is_historical=True,
                **fields,
            )
        )
        return memorial.id

    memorial_id = run_in_session(client, _create)
    memorial_service._public_list_cache.clear()
    return memorial_id


def expire_invitation(client: TestClient, email: str) -> None:
    async def _expire(session):
        repo = FamilyUserRepository(session)
        user: FamilyUser = await repo.get_by_email(email)
        user.invitation_expiry = utcnow() - timedelta(days=1)
        session.add(user)

    run_in_session(client, _expire)
