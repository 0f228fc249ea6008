"""
Repositories do conteúdo de um memorial: descendentes, fotos e dedicatórias.
"""

from typing import Optional

from sqlalchemy import func, select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from portal.domain.sqlmodels import Dedication, Descendant, Photo


class DescendantRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, descendant: Descendant) -> Descendant:
        self.session.add(descendant)
        await self.session.flush()
        await self.session.refresh(descendant)
        return descendant

    async def get_by_id(self, descendant_id: int) -> Optional[Descendant]:
        return await self.session.get(Descendant, descendant_id)

    async def list_by_memorial(self, memorial_id: int) -> list[Descendant]:
        stmt = (
            select(Descendant)
            .where(Descendant.memorial_id == memorial_id)
            .order_by(Descendant.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, descendant: Descendant) -> None:
        await self.session.delete(descendant)
        await self.session.flush()


class PhotoRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, photo: Photo) -> Photo:
        self.session.add(photo)
        await self.session.flush()
        await self.session.refresh(photo)
        return photo

    async def get_by_id(self, photo_id: int) -> Optional[Photo]:
        return await self.session.get(Photo, photo_id)

    async def list_by_memorial(self, memorial_id: int) -> list[Photo]:
        """Fotos na ordem definida pela família (sort_order asc)."""
        stmt = (
            select(Photo)
            .where(Photo.memorial_id == memorial_id)
            .order_by(Photo.sort_order, Photo.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, photo: Photo) -> None:
        await self.session.delete(photo)
        await self.session.flush()


class DedicationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, dedication: Dedication) -> Dedication:
        self.session.add(dedication)
        await self.session.flush()
        await self.session.refresh(dedication)
        return dedication

    async def get_by_id(self, dedication_id: int) -> Optional[Dedication]:
        return await self.session.get(Dedication, dedication_id)

    async def list_by_memorial(self, memorial_id: int) -> list[Dedication]:
        """Dedicatórias mais recentes primeiro."""
        stmt = (
            select(Dedication)
            .where(Dedication.memorial_id == memorial_id)
            .order_by(Dedication.created_at.desc(), Dedication.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, dedication: Dedication) -> None:
        await self.session.delete(dedication)
        await self.session.flush()

    async def count(self) -> int:
        result = await self.session.execute(sa_select(func.count()).select_from(Dedication))
        return int(result.scalar_one())
