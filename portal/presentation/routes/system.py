from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from portal.config.settings import settings
from portal.infrastructure.db_engine import get_db
from portal.services.sitemap_service import render_sitemap
from portal.utils.dates import to_iso_utc, utcnow

router = APIRouter(tags=["System"])

# Servido na raiz do site, fora do prefixo /api
sitemap_router = APIRouter(tags=["System"])


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": to_iso_utc(utcnow()),
        "env": settings.server.env,
        "version": settings.server.version,
    }


@sitemap_router.get("/sitemap.xml", include_in_schema=False)
async def sitemap(session: AsyncSession = Depends(get_db)):
    xml = await render_sitemap(session)
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Cache-Control": "public, max-age=3600"},
    )
