"""
Repositories de Contas: funerárias, famílias e administradores.

Segue o padrão Repository do projeto: isolamento da lógica SQL
para facilitar testes e troca de banco de dados.
"""

from typing import Optional

from sqlalchemy import func, select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from portal.domain.sqlmodels import AdminUser, FamilyUser, FuneralHome


class FuneralHomeRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, funeral_home: FuneralHome) -> FuneralHome:
        self.session.add(funeral_home)
        await self.session.flush()
        await self.session.refresh(funeral_home)
        return funeral_home

    async def get_by_id(self, funeral_home_id: int) -> Optional[FuneralHome]:
        return await self.session.get(FuneralHome, funeral_home_id)

    async def get_by_email(self, email: str) -> Optional[FuneralHome]:
        stmt = select(FuneralHome).where(FuneralHome.email == email)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_all(self) -> list[FuneralHome]:
        stmt = select(FuneralHome).order_by(FuneralHome.name, FuneralHome.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(sa_select(func.count()).select_from(FuneralHome))
        return int(result.scalar_one())


class FamilyUserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, family_user: FamilyUser) -> FamilyUser:
        self.session.add(family_user)
        await self.session.flush()
        await self.session.refresh(family_user)
        return family_user

    async def get_by_id(self, family_user_id: int) -> Optional[FamilyUser]:
        return await self.session.get(FamilyUser, family_user_id)

    async def get_by_email(self, email: str) -> Optional[FamilyUser]:
        stmt = select(FamilyUser).where(FamilyUser.email == email)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_invitation_token(self, token: str) -> Optional[FamilyUser]:
        stmt = select(FamilyUser).where(FamilyUser.invitation_token == token)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_all(self) -> list[FamilyUser]:
        stmt = select(FamilyUser).order_by(FamilyUser.created_at.desc(), FamilyUser.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(sa_select(func.count()).select_from(FamilyUser))
        return int(result.scalar_one())


class AdminUserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, admin: AdminUser) -> AdminUser:
        self.session.add(admin)
        await self.session.flush()
        await self.session.refresh(admin)
        return admin

    async def get_by_id(self, admin_id: int) -> Optional[AdminUser]:
        return await self.session.get(AdminUser, admin_id)

    async def get_by_email(self, email: str) -> Optional[AdminUser]:
        stmt = select(AdminUser).where(AdminUser.email == email)
        result = await self.session.execute(stmt)
        return result.scalars().first()
