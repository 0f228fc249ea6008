"""
Service de Autenticação: cadastro, login das três contas, convite da
família e manutenção do perfil.

Devolve Principals; a emissão do token e do cookie fica com o router.
"""

import logging
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from portal.config.constants import AccountType
from portal.config.exceptions import AuthenticationError, ConflictError, ValidationError
from portal.domain.models import Principal
from portal.domain.sqlmodels import AdminUser, FamilyUser, FuneralHome
from portal.infrastructure.repositories.account_repository import (
    AdminUserRepository,
    FamilyUserRepository,
    FuneralHomeRepository,
)
from portal.presentation.schemas.auth_schemas import (
    ChangePasswordIn,
    FuneralHomeRegisterIn,
    ProfileUpdateIn,
)
from portal.utils.dates import as_utc, utcnow
from portal.utils.passwords import hash_password, validate_password_strength, verify_password

logger = logging.getLogger("service.auth")

Account = Union[FuneralHome, FamilyUser, AdminUser]


def _principal_for(account_type: AccountType, account: Account) -> Principal:
    return Principal(
        account_type=account_type,
        account_id=account.id,
        name=account.name,
        email=account.email,
    )


class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.funeral_homes = FuneralHomeRepository(session)
        self.family_users = FamilyUserRepository(session)
        self.admins = AdminUserRepository(session)

    # ─── Funerárias ────────────────────────────────────────────────────────

    async def register_funeral_home(self, data: FuneralHomeRegisterIn) -> Principal:
        password = validate_password_strength(data.password)
        if await self.funeral_homes.get_by_email(data.email):
            raise ConflictError("E-mail já registrado", field="email")

        funeral_home = await self.funeral_homes.create(
            FuneralHome(
                name=data.name,
                email=data.email,
                password_hash=hash_password(password),
                phone=data.phone,
                address=data.address,
            )
        )
        await self.session.commit()
        logger.info("Funerária registrada: id=%s", funeral_home.id)
        return _principal_for(AccountType.FUNERAL_HOME, funeral_home)

    async def login_funeral_home(self, email: str, password: str) -> Principal:
        funeral_home = await self.funeral_homes.get_by_email(email)
        if not funeral_home or not verify_password(password, funeral_home.password_hash):
            logger.warning("Login de funerária recusado")
            raise AuthenticationError()
        logger.info("Login de funerária: id=%s", funeral_home.id)
        return _principal_for(AccountType.FUNERAL_HOME, funeral_home)

    # ─── Famílias ──────────────────────────────────────────────────────────

    async def login_family_user(self, email: str, password: str) -> Principal:
        family_user = await self.family_users.get_by_email(email)
        # Conta sem senha = convite ainda não aceito
        if (
            not family_user
            or not family_user.is_active
            or not verify_password(password, family_user.password_hash)
        ):
            logger.warning("Login de família recusado")
            raise AuthenticationError()
        logger.info("Login de família: id=%s", family_user.id)
        return _principal_for(AccountType.FAMILY_USER, family_user)

    async def accept_invitation(self, token: str, password: str) -> Principal:
        """
        Ativa a conta da família a partir do token de convite.

        O token é de uso único: após o aceite, token e validade são apagados.
        """
        family_user = await self.family_users.get_by_invitation_token(token.strip())
        if not family_user:
            raise ValidationError("Convite inválido ou expirado", field="token")
        if family_user.invitation_expiry is None or as_utc(family_user.invitation_expiry) < utcnow():
            raise ValidationError("O convite expirou", field="token")

        password = validate_password_strength(password)
        family_user.password_hash = hash_password(password)
        family_user.is_active = True
        family_user.invitation_token = None
        family_user.invitation_expiry = None
        family_user.updated_at = utcnow()
        self.session.add(family_user)
        await self.session.commit()

        logger.info("Convite aceito: family_user=%s", family_user.id)
        return _principal_for(AccountType.FAMILY_USER, family_user)

    # ─── Administradores ───────────────────────────────────────────────────

    async def login_admin(self, email: str, password: str) -> Principal:
        admin = await self.admins.get_by_email(email)
        if not admin or not verify_password(password, admin.password_hash):
            logger.warning("Login administrativo recusado")
            raise AuthenticationError()
        if not admin.is_active:
            logger.warning("Login de admin inativo: id=%s", admin.id)
            raise AuthenticationError("Conta de administrador desativada")

        admin.last_login = utcnow()
        self.session.add(admin)
        await self.session.commit()
        logger.info("Login administrativo: id=%s", admin.id)
        return _principal_for(AccountType.ADMIN, admin)

    # ─── Perfil ────────────────────────────────────────────────────────────

    async def _load_account(self, principal: Principal) -> Account:
        account: Optional[Account]
        if principal.is_funeral_home:
            account = await self.funeral_homes.get_by_id(principal.account_id)
        elif principal.is_family_user:
            account = await self.family_users.get_by_id(principal.account_id)
        else:
            account = await self.admins.get_by_id(principal.account_id)
        if account is None:
            raise AuthenticationError("Sessão inválida", code="SESSION_INVALID")
        return account

    @staticmethod
    def _profile_dict(principal: Principal, account: Account) -> dict:
        return {
            "id": account.id,
            "type": principal.account_type.value,
            "name": account.name,
            "email": account.email,
            "phone": getattr(account, "phone", None),
            "address": getattr(account, "address", None),
        }

    async def get_profile(self, principal: Principal) -> dict:
        account = await self._load_account(principal)
        return self._profile_dict(principal, account)

    async def update_profile(self, principal: Principal, data: ProfileUpdateIn) -> dict:
        account = await self._load_account(principal)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise ValidationError("Nome é obrigatório", field="name")
            account.name = name
        if "phone" in changes and hasattr(account, "phone"):
            account.phone = changes["phone"]
        if "address" in changes and principal.is_funeral_home:
            account.address = changes["address"]

        account.updated_at = utcnow()
        self.session.add(account)
        await self.session.commit()
        logger.info("Perfil atualizado: %s", principal.subject)
        return self._profile_dict(principal, account)

    async def change_password(self, principal: Principal, data: ChangePasswordIn) -> None:
        if data.new_password != data.confirm_password:
            raise ValidationError("As senhas não coincidem.", field="confirm_password")

        account = await self._load_account(principal)
        if not verify_password(data.current_password, account.password_hash):
            raise ValidationError("Senha atual incorreta.", field="current_password")

        new_password = validate_password_strength(data.new_password, field="new_password")
        account.password_hash = hash_password(new_password)
        account.updated_at = utcnow()
        self.session.add(account)
        await self.session.commit()
        logger.info("Senha alterada: %s", principal.subject)
