"""
Endpoints REST de Memoriais, descendentes e fotos.

Rotas públicas (listagem pública, memorial por slug, listas de conteúdo)
aceitam visitantes; as demais exigem sessão.
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from portal.config.constants import StatusLabels
from portal.domain.models import Principal
from portal.presentation.schemas.memorial_schemas import (
    DescendantCreate,
    DescendantOut,
    MemorialCreate,
    MemorialCreatedOut,
    MemorialDetailOut,
    MemorialOut,
    MemorialSummaryOut,
    MemorialUpdate,
    PhotoCreate,
    PhotoOut,
    PublicMemorialOut,
    QRCodeOut,
)
from portal.server.dependencies import (
    get_content_service,
    get_memorial_service,
    get_principal,
    require_principal,
)
from portal.services.content_service import ContentService
from portal.services.memorial_service import MemorialService

logger = logging.getLogger("routes.memorials")

router = APIRouter(prefix="/memorials", tags=["Memorials"])


def summary_out(memorial, photo_count: int, dedication_count: int) -> MemorialSummaryOut:
    return MemorialSummaryOut.model_validate(
        {
            **memorial.model_dump(),
            "photo_count": photo_count,
            "dedication_count": dedication_count,
            "status_label": StatusLabels.MEMORIAL.get(memorial.status, memorial.status),
        }
    )


# ─── Memoriais ─────────────────────────────────────────────────────────────


@router.get("", response_model=list[MemorialSummaryOut])
async def list_memorials(
    funeral_home_id: Optional[int] = Query(default=None),
    family_user_id: Optional[int] = Query(default=None),
    principal: Principal = Depends(require_principal),
    service: MemorialService = Depends(get_memorial_service),
):
    """Memoriais do painel com total de fotos e dedicatórias."""
    rows = await service.list_memorials(principal, funeral_home_id, family_user_id)
    return [summary_out(*row) for row in rows]


@router.get("/public", response_model=list[PublicMemorialOut])
async def list_public_memorials(
    search: Optional[str] = Query(default=None, max_length=200),
    category: Optional[str] = Query(default=None, max_length=32),
    service: MemorialService = Depends(get_memorial_service),
):
    """Memoriais ativos e públicos (cache de 60s)."""
    return await service.list_public_memorials(search=search, category=category)


@router.post("", response_model=MemorialCreatedOut, status_code=status.HTTP_201_CREATED)
async def create_memorial(
    payload: MemorialCreate,
    principal: Principal = Depends(require_principal),
    service: MemorialService = Depends(get_memorial_service),
):
    return await service.create_memorial(payload, principal)


@router.get("/slug/{slug}", response_model=MemorialDetailOut)
async def get_memorial_by_slug(
    slug: str,
    principal: Optional[Principal] = Depends(get_principal),
    service: MemorialService = Depends(get_memorial_service),
):
    """Página pública do memorial (/m/{slug})."""
    return await service.get_memorial_by_slug(slug, principal)


@router.get("/slug/{slug}/qrcode", response_model=QRCodeOut)
async def get_memorial_qrcode(
    slug: str,
    format: Literal["png", "svg"] = Query(default="png"),
    base_url: Optional[str] = Query(default=None, max_length=255),
    principal: Optional[Principal] = Depends(get_principal),
    service: MemorialService = Depends(get_memorial_service),
):
    return await service.generate_qr_code(slug, principal, fmt=format, base_url=base_url)


@router.get("/{memorial_id}", response_model=MemorialDetailOut)
async def get_memorial(
    memorial_id: int,
    principal: Principal = Depends(require_principal),
    service: MemorialService = Depends(get_memorial_service),
):
    return await service.get_memorial(memorial_id, principal)


@router.patch("/{memorial_id}", response_model=MemorialOut)
@router.put("/{memorial_id}", response_model=MemorialOut)
async def update_memorial(
    memorial_id: int,
    payload: MemorialUpdate,
    principal: Principal = Depends(require_principal),
    service: MemorialService = Depends(get_memorial_service),
):
    """Atualização parcial: apenas os campos enviados mudam."""
    memorial = await service.update_memorial(memorial_id, payload, principal)
    return MemorialOut.model_validate(memorial)


@router.delete("/{memorial_id}")
async def delete_memorial(
    memorial_id: int,
    principal: Principal = Depends(require_principal),
    service: MemorialService = Depends(get_memorial_service),
):
    memorial = await service.delete_memorial(memorial_id, principal)
    return {"success": True, "id": memorial.id, "status": memorial.status}


# ─── Descendentes ──────────────────────────────────────────────────────────


@router.get("/{memorial_id}/descendants", response_model=list[DescendantOut])
async def list_descendants(
    memorial_id: int,
    principal: Optional[Principal] = Depends(get_principal),
    service: ContentService = Depends(get_content_service),
):
    return await service.list_descendants(memorial_id, principal)


@router.post(
    "/{memorial_id}/descendants",
    response_model=DescendantOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_descendant(
    memorial_id: int,
    payload: DescendantCreate,
    principal: Principal = Depends(require_principal),
    service: ContentService = Depends(get_content_service),
):
    return await service.create_descendant(memorial_id, payload, principal)


# ─── Fotos ─────────────────────────────────────────────────────────────────


@router.get("/{memorial_id}/photos", response_model=list[PhotoOut])
async def list_photos(
    memorial_id: int,
    principal: Optional[Principal] = Depends(get_principal),
    service: ContentService = Depends(get_content_service),
):
    """Galeria na ordem definida pela família."""
    return await service.list_photos(memorial_id, principal)


@router.post(
    "/{memorial_id}/photos",
    response_model=PhotoOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_photo(
    memorial_id: int,
    payload: PhotoCreate,
    principal: Principal = Depends(require_principal),
    service: ContentService = Depends(get_content_service),
):
    return await service.create_photo(memorial_id, payload, principal)


# Remoções por id próprio, fora do prefixo do memorial
content_router = APIRouter(tags=["Memorials"])


@content_router.delete("/descendants/{descendant_id}")
async def delete_descendant(
    descendant_id: int,
    principal: Principal = Depends(require_principal),
    service: ContentService = Depends(get_content_service),
):
    await service.delete_descendant(descendant_id, principal)
    return {"success": True}


@content_router.delete("/photos/{photo_id}")
async def delete_photo(
    photo_id: int,
    principal: Principal = Depends(require_principal),
    service: ContentService = Depends(get_content_service),
):
    await service.delete_photo(photo_id, principal)
    return {"success": True}
