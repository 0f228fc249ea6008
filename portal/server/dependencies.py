"""
Dependências FastAPI: sessão autenticada e fábricas de services.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from portal.domain.models import Principal
from portal.infrastructure.db_engine import get_db
from portal.services.admin_service import AdminService
from portal.services.auth_service import AuthService
from portal.services.content_service import ContentService
from portal.services.memorial_service import MemorialService
from portal.services.payment_service import PaymentService


def get_principal(request: Request) -> Optional[Principal]:
    """Conta resolvida pelo SessionMiddleware (None para visitantes)."""
    return getattr(request.state, "principal", None)


def require_principal(principal: Optional[Principal] = Depends(get_principal)) -> Principal:
    if principal is None:
        raise HTTPException(status_code=401, detail="Sessão ausente ou expirada")
    return principal


def require_admin(principal: Principal = Depends(require_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Acesso restrito a administradores")
    return principal


def get_auth_service(session: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(session)


def get_memorial_service(session: AsyncSession = Depends(get_db)) -> MemorialService:
    return MemorialService(session)


def get_content_service(session: AsyncSession = Depends(get_db)) -> ContentService:
    return ContentService(session)


def get_payment_service(session: AsyncSession = Depends(get_db)) -> PaymentService:
    return PaymentService(session)


def get_admin_service(session: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(session)
