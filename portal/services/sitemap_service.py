"""
Geração do sitemap.xml: páginas estáticas + /m/{slug} dos memoriais
ativos e públicos.
"""

from typing import Iterable
from xml.sax.saxutils import escape

from sqlalchemy.ext.asyncio import AsyncSession

from portal.config.constants import SitemapConfig
from portal.config.settings import settings
from portal.domain.sqlmodels import Memorial
from portal.infrastructure.repositories.memorial_repository import MemorialRepository
from portal.utils.dates import utcnow

_XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'
_URLSET_OPEN = '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'


def _url_entry(loc: str, changefreq: str, priority: str, lastmod: str | None = None) -> str:
    parts = ["  <url>", f"    <loc>{escape(loc)}</loc>"]
    if lastmod:
        parts.append(f"    <lastmod>{lastmod}</lastmod>")
    parts.append(f"    <changefreq>{changefreq}</changefreq>")
    parts.append(f"    <priority>{priority}</priority>")
    parts.append("  </url>")
    return "\n".join(parts)


def build_sitemap(memorials: Iterable[Memorial], base_url: str) -> str:
    base_url = base_url.rstrip("/")
    today = utcnow().date().isoformat()
    entries = [
        _url_entry(f"{base_url}{path}", changefreq, priority, today)
        for path, changefreq, priority in SitemapConfig.STATIC_PAGES
    ]
    for memorial in memorials:
        priority = (
            SitemapConfig.HISTORICAL_PRIORITY
            if memorial.is_historical
            else SitemapConfig.MEMORIAL_PRIORITY
        )
        lastmod = memorial.updated_at.date().isoformat() if memorial.updated_at else today
        entries.append(_url_entry(f"{base_url}/m/{memorial.slug}", "weekly", priority, lastmod))

    return "\n".join([_XML_HEADER, _URLSET_OPEN, *entries, "</urlset>"]) + "\n"


async def render_sitemap(session: AsyncSession, base_url: str | None = None) -> str:
    memorials = await MemorialRepository(session).list_public_active()
    return build_sitemap(memorials, base_url or settings.server.public_base_url)
