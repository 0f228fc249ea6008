"""
Endpoints de Dedicatórias: envio público (com rate limit por IP),
listagem por memorial e moderação.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from portal.config.settings import settings
from portal.domain.models import Principal
from portal.presentation.schemas.memorial_schemas import DedicationCreate, DedicationOut
from portal.server.dependencies import get_content_service, get_principal, require_principal
from portal.server.rate_limit import dedication_rate_limiter, enforce_rate_limit
from portal.services.content_service import ContentService
from portal.utils.auth import extract_client_ip

logger = logging.getLogger("routes.dedications")

router = APIRouter(prefix="/dedications", tags=["Dedications"])


@router.post("", response_model=DedicationOut, status_code=status.HTTP_201_CREATED)
async def create_dedication(
    payload: DedicationCreate,
    request: Request,
    principal: Optional[Principal] = Depends(get_principal),
    service: ContentService = Depends(get_content_service),
):
    """Mensagem de homenagem deixada por um visitante."""
    await enforce_rate_limit(
        dedication_rate_limiter,
        f"dedication:{extract_client_ip(request)}",
        settings.security.dedication_requests_per_minute,
        detail="Muitas dedicatórias em sequência. Aguarde um minuto.",
    )
    return await service.create_dedication(payload, principal)


@router.get("", response_model=list[DedicationOut])
async def list_dedications(
    memorial_id: Optional[int] = Query(default=None),
    principal: Optional[Principal] = Depends(get_principal),
    service: ContentService = Depends(get_content_service),
):
    return await service.list_dedications(memorial_id, principal)


@router.delete("/{dedication_id}")
async def delete_dedication(
    dedication_id: int,
    principal: Principal = Depends(require_principal),
    service: ContentService = Depends(get_content_service),
):
    await service.delete_dedication(dedication_id, principal)
    return {"success": True}
