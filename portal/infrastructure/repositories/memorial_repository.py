"""
Repository de Memoriais: camada de acesso a dados.

Inclui a listagem com contadores de fotos/dedicatórias usada nos painéis
e a listagem pública (ativos + públicos) servida pelo cache.
"""

import logging
from typing import Optional

from sqlalchemy import func, select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from portal.config.constants import MemorialStatus, MemorialVisibility
from portal.domain.sqlmodels import Dedication, Memorial, Photo
from portal.utils.dates import utcnow

logger = logging.getLogger("repository.memorials")


class MemorialRepository:
    """Operações de banco de dados para Memoriais."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, memorial: Memorial) -> Memorial:
        self.session.add(memorial)
        await self.session.flush()  # Garante id antes do commit
        await self.session.refresh(memorial)
        return memorial

    async def get_by_id(self, memorial_id: int) -> Optional[Memorial]:
        return await self.session.get(Memorial, memorial_id)

    async def get_by_slug(self, slug: str) -> Optional[Memorial]:
        stmt = select(Memorial).where(Memorial.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def slug_exists(self, slug: str) -> bool:
        stmt = sa_select(Memorial.id).where(Memorial.slug == slug).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def list_with_counts(
        self,
        funeral_home_id: Optional[int] = None,
        family_user_id: Optional[int] = None,
    ) -> list[tuple[Memorial, int, int]]:
        """
        Retorna (memorial, total de fotos, total de dedicatórias),
        mais recentes primeiro.
        """
        photo_counts = (
            sa_select(Photo.memorial_id, func.count(Photo.id).label("total"))
            .group_by(Photo.memorial_id)
            .subquery()
        )
        dedication_counts = (
            sa_select(Dedication.memorial_id, func.count(Dedication.id).label("total"))
            .group_by(Dedication.memorial_id)
            .subquery()
        )
        stmt = (
            sa_select(
                Memorial,
                func.coalesce(photo_counts.c.total, 0),
                func.coalesce(dedication_counts.c.total, 0),
            )
            .outerjoin(photo_counts, photo_counts.c.memorial_id == Memorial.id)
            .outerjoin(dedication_counts, dedication_counts.c.memorial_id == Memorial.id)
            .order_by(Memorial.created_at.desc(), Memorial.id.desc())
        )
        if funeral_home_id is not None:
            stmt = stmt.where(Memorial.funeral_home_id == funeral_home_id)
        if family_user_id is not None:
            stmt = stmt.where(Memorial.family_user_id == family_user_id)

        result = await self.session.execute(stmt)
        return [(row[0], int(row[1]), int(row[2])) for row in result.all()]

    async def list_public_active(self) -> list[Memorial]:
        stmt = (
            select(Memorial)
            .where(Memorial.status == MemorialStatus.ACTIVE.value)
            .where(Memorial.visibility == MemorialVisibility.PUBLIC.value)
            .order_by(Memorial.is_historical.desc(), Memorial.full_name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_fields(self, memorial: Memorial, changes: dict) -> Memorial:
        for field_name, value in changes.items():
            setattr(memorial, field_name, value)
        memorial.updated_at = utcnow()
        self.session.add(memorial)
        await self.session.flush()
        await self.session.refresh(memorial)
        return memorial

    async def count_by_status(self) -> dict[str, int]:
        stmt = sa_select(Memorial.status, func.count(Memorial.id)).group_by(Memorial.status)
        result = await self.session.execute(stmt)
        return {status: int(total) for status, total in result.all()}
