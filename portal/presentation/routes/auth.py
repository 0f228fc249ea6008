"""
Endpoints de autenticação: cadastro/login das contas, convite da família,
sessão atual e perfil.

O token de sessão volta no corpo (`token`) e num cookie http-only.
"""

import logging
from dataclasses import replace
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status

from portal.config.settings import settings
from portal.domain.models import Principal
from portal.presentation.schemas.auth_schemas import (
    AcceptInvitationIn,
    ChangePasswordIn,
    FuneralHomeRegisterIn,
    LoginIn,
    MeOut,
    ProfileOut,
    ProfileUpdateIn,
    SessionOut,
)
from portal.server.dependencies import get_auth_service, get_principal, require_principal
from portal.server.middleware import create_session_token, session_ttl_seconds
from portal.server.rate_limit import enforce_rate_limit, login_rate_limiter
from portal.services.auth_service import AuthService
from portal.utils.auth import extract_client_ip, is_secure_request

logger = logging.getLogger("routes.auth")

router = APIRouter(prefix="/auth", tags=["Auth"])


def _start_session(request: Request, response: Response, principal: Principal) -> SessionOut:
    token = create_session_token(principal)
    max_age = session_ttl_seconds(principal.account_type)
    response.set_cookie(
        key=settings.auth.session_cookie_name,
        value=token,
        max_age=max_age,
        httponly=True,
        samesite="lax",
        secure=is_secure_request(request),
        path="/",
    )
    return SessionOut(account=principal.to_dict(), token=token, expires_in=max_age)


async def _limit_login(request: Request, scope: str) -> None:
    await enforce_rate_limit(
        login_rate_limiter,
        f"login:{scope}:{extract_client_ip(request)}",
        settings.security.login_requests_per_minute,
        detail="Muitas tentativas de login. Aguarde um minuto.",
    )


# ─── Funerárias ────────────────────────────────────────────────────────────


@router.post(
    "/funeral-homes/register",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
)
async def register_funeral_home(
    payload: FuneralHomeRegisterIn,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    """Cadastra a funerária e já inicia a sessão."""
    await _limit_login(request, "register")
    principal = await service.register_funeral_home(payload)
    return _start_session(request, response, principal)


@router.post("/funeral-homes/login", response_model=SessionOut)
async def login_funeral_home(
    payload: LoginIn,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    await _limit_login(request, "funeral_home")
    principal = await service.login_funeral_home(payload.email, payload.password)
    return _start_session(request, response, principal)


# ─── Famílias ──────────────────────────────────────────────────────────────


@router.post("/family/login", response_model=SessionOut)
async def login_family_user(
    payload: LoginIn,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    await _limit_login(request, "family_user")
    principal = await service.login_family_user(payload.email, payload.password)
    return _start_session(request, response, principal)


@router.post("/family/accept-invitation", response_model=SessionOut)
async def accept_invitation(
    payload: AcceptInvitationIn,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    """Define a senha da família a partir do convite e inicia a sessão."""
    await _limit_login(request, "invitation")
    principal = await service.accept_invitation(payload.token, payload.password)
    return _start_session(request, response, principal)


# ─── Administradores ───────────────────────────────────────────────────────


@router.post("/admin/login", response_model=SessionOut)
async def login_admin(
    payload: LoginIn,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    await _limit_login(request, "admin")
    principal = await service.login_admin(payload.email, payload.password)
    return _start_session(request, response, principal)


# ─── Sessão e perfil ───────────────────────────────────────────────────────


@router.get("/me", response_model=MeOut)
async def me(principal: Optional[Principal] = Depends(get_principal)):
    if principal is None:
        return MeOut(authenticated=False)
    return MeOut(authenticated=True, account=principal.to_dict())


@router.post("/logout")
async def logout(request: Request, response: Response):
    response.delete_cookie(
        key=settings.auth.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=is_secure_request(request),
    )
    return {"success": True}


@router.get("/profile", response_model=ProfileOut)
async def get_profile(
    principal: Principal = Depends(require_principal),
    service: AuthService = Depends(get_auth_service),
):
    return await service.get_profile(principal)


@router.patch("/profile", response_model=ProfileOut)
async def update_profile(
    payload: ProfileUpdateIn,
    request: Request,
    response: Response,
    principal: Principal = Depends(require_principal),
    service: AuthService = Depends(get_auth_service),
):
    profile = await service.update_profile(principal, payload)
    # O nome viaja no token: reemite a sessão para /me refletir a alteração
    session = _start_session(request, response, replace(principal, name=profile["name"]))
    return {**profile, "token": session.token}


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordIn,
    principal: Principal = Depends(require_principal),
    service: AuthService = Depends(get_auth_service),
):
    await service.change_password(principal, payload)
    return {"success": True, "message": "Senha alterada com sucesso."}
