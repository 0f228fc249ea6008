"""
Service do conteúdo dos memoriais: descendentes, fotos e dedicatórias.

Leitura segue a visibilidade do memorial; escrita exige dono ou admin,
exceto dedicatórias, que qualquer visitante pode enviar.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from portal.config.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from portal.domain.models import Principal
from portal.domain.sqlmodels import Dedication, Descendant, Memorial, Photo
from portal.infrastructure.repositories.content_repository import (
    DedicationRepository,
    DescendantRepository,
    PhotoRepository,
)
from portal.infrastructure.repositories.memorial_repository import MemorialRepository
from portal.presentation.schemas.memorial_schemas import (
    DedicationCreate,
    DescendantCreate,
    PhotoCreate,
)
from portal.services.memorial_service import (
    MEMORIAL_NOT_FOUND,
    can_manage_memorial,
    ensure_viewable,
)

logger = logging.getLogger("service.content")


class ContentService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.memorials = MemorialRepository(session)
        self.descendants = DescendantRepository(session)
        self.photos = PhotoRepository(session)
        self.dedications = DedicationRepository(session)

    async def _viewable(self, memorial_id: int, principal: Optional[Principal]) -> Memorial:
        return ensure_viewable(await self.memorials.get_by_id(memorial_id), principal)

    async def _managed(self, memorial_id: int, principal: Principal) -> Memorial:
        memorial = await self.memorials.get_by_id(memorial_id)
        if memorial is None:
            raise NotFoundError("Memorial", memorial_id, message=MEMORIAL_NOT_FOUND)
        if not can_manage_memorial(principal, memorial):
            raise PermissionDeniedError("Você não tem permissão para gerenciar este memorial")
        return memorial

    # ─── Descendentes ──────────────────────────────────────────────────────

    async def list_descendants(
        self, memorial_id: int, principal: Optional[Principal] = None
    ) -> list[Descendant]:
        await self._viewable(memorial_id, principal)
        return await self.descendants.list_by_memorial(memorial_id)

    async def create_descendant(
        self, memorial_id: int, data: DescendantCreate, principal: Principal
    ) -> Descendant:
        await self._managed(memorial_id, principal)
        descendant = await self.descendants.create(
            Descendant(memorial_id=memorial_id, name=data.name, relationship=data.relationship)
        )
        await self.session.commit()
        logger.info("Descendente criado: id=%s memorial=%s", descendant.id, memorial_id)
        return descendant

    async def delete_descendant(self, descendant_id: int, principal: Principal) -> None:
        descendant = await self.descendants.get_by_id(descendant_id)
        if descendant is None:
            raise NotFoundError("Descendente", descendant_id, message="Descendente não encontrado")
        await self._managed(descendant.memorial_id, principal)
        await self.descendants.delete(descendant)
        await self.session.commit()
        logger.info("Descendente removido: id=%s", descendant_id)

    # ─── Fotos ─────────────────────────────────────────────────────────────

    async def list_photos(self, memorial_id: int, principal: Optional[Principal] = None) -> list[Photo]:
        await self._viewable(memorial_id, principal)
        return await self.photos.list_by_memorial(memorial_id)

    async def create_photo(self, memorial_id: int, data: PhotoCreate, principal: Principal) -> Photo:
        await self._managed(memorial_id, principal)
        photo = await self.photos.create(
            Photo(
                memorial_id=memorial_id,
                file_url=data.file_url.strip(),
                caption=data.caption,
                sort_order=data.sort_order,
            )
        )
        await self.session.commit()
        logger.info("Foto adicionada: id=%s memorial=%s", photo.id, memorial_id)
        return photo

    async def delete_photo(self, photo_id: int, principal: Principal) -> None:
        photo = await self.photos.get_by_id(photo_id)
        if photo is None:
            raise NotFoundError("Foto", photo_id, message="Foto não encontrada")
        await self._managed(photo.memorial_id, principal)
        await self.photos.delete(photo)
        await self.session.commit()
        logger.info("Foto removida: id=%s", photo_id)

    # ─── Dedicatórias ──────────────────────────────────────────────────────

    async def create_dedication(
        self, data: DedicationCreate, principal: Optional[Principal] = None
    ) -> Dedication:
        if not data.memorial_id or not data.author_name or not data.message:
            raise ValidationError("memorial_id, author_name e message são obrigatórios")

        await self._viewable(data.memorial_id, principal)
        dedication = await self.dedications.create(
            Dedication(
                memorial_id=data.memorial_id,
                author_name=data.author_name,
                message=data.message,
            )
        )
        await self.session.commit()
        logger.info("Dedicatória criada: id=%s memorial=%s", dedication.id, data.memorial_id)
        return dedication

    async def list_dedications(
        self, memorial_id: Optional[int], principal: Optional[Principal] = None
    ) -> list[Dedication]:
        if not memorial_id:
            raise ValidationError("memorial_id é obrigatório", field="memorial_id")
        await self._viewable(memorial_id, principal)
        return await self.dedications.list_by_memorial(memorial_id)

    async def delete_dedication(self, dedication_id: int, principal: Principal) -> None:
        """Moderação: dono do memorial ou admin remove a mensagem."""
        dedication = await self.dedications.get_by_id(dedication_id)
        if dedication is None:
            raise NotFoundError("Dedicatória", dedication_id, message="Dedicatória não encontrada")
        await self._managed(dedication.memorial_id, principal)
        await self.dedications.delete(dedication)
        await self.session.commit()
        logger.info("Dedicatória removida: id=%s by=%s", dedication_id, principal.subject)
