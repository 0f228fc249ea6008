"""
Schemas Pydantic para autenticação e perfil das contas.
"""

import re
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(value: str) -> str:
    email = (value or "").strip().lower()
    if not _EMAIL_PATTERN.match(email):
        raise ValueError("E-mail inválido")
    return email


class LoginIn(BaseModel):
    """Payload de login (funerária, família ou admin)."""

    email: str = Field(max_length=320)
    password: str = Field(min_length=1, max_length=200)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)


class FuneralHomeRegisterIn(BaseModel):
    """Payload para cadastro de funerária (POST /api/auth/funeral-homes/register)."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=320)
    password: str = Field(max_length=200)
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Nome é obrigatório")
        return v


class AcceptInvitationIn(BaseModel):
    token: str = Field(min_length=1, max_length=255)
    password: str = Field(max_length=200)


class ProfileUpdateIn(BaseModel):
    """Atualização parcial do perfil; `address` só se aplica a funerárias."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=2000)


class ChangePasswordIn(BaseModel):
    current_password: str = Field(min_length=1, max_length=200)
    new_password: str = Field(max_length=200)
    confirm_password: str = Field(max_length=200)


class AccountOut(BaseModel):
    id: int
    type: Literal["funeral_home", "family_user", "admin"]
    name: str
    email: str
    open_id: str


class SessionOut(BaseModel):
    """Resposta de login: conta autenticada + token (também enviado em cookie)."""

    success: bool = True
    account: AccountOut
    token: str
    expires_in: int


class MeOut(BaseModel):
    authenticated: bool
    account: Optional[AccountOut] = None


class ProfileOut(BaseModel):
    id: int
    type: Literal["funeral_home", "family_user", "admin"]
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    # Presente apenas quando a sessão foi reemitida (PATCH /profile)
    token: Optional[str] = None
