"""
Gera o sitemap.xml estático (para deploy em CDN/hosting estático).

Uso:
    python scripts/generate_sitemap.py
    python scripts/generate_sitemap.py --output dist/sitemap.xml --base-url https://exemplo.com.br
"""

import argparse
import asyncio
import os
import sys

# Adicionar root ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from portal.config.constants import SitemapConfig  # noqa: E402
from portal.config.settings import settings  # noqa: E402
from portal.infrastructure.db_engine import close_db, get_session  # noqa: E402
from portal.services.sitemap_service import render_sitemap  # noqa: E402

DEFAULT_OUTPUT = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "public", "sitemap.xml")


async def main(output: str, base_url: str) -> None:
    print("🗺️ Gerando sitemap...")
    try:
        async with get_session() as session:
            xml = await render_sitemap(session, base_url)
    finally:
        await close_db()

    os.makedirs(os.path.dirname(os.path.abspath(output)), exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        f.write(xml)

    total = xml.count("<url>")
    static_pages = len(SitemapConfig.STATIC_PAGES)
    print(f"✅ Sitemap gravado em {output}")
    print(f"   Páginas estáticas: {static_pages}")
    print(f"   Memoriais: {total - static_pages}")
    print(f"   Total de URLs: {total}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Gera o sitemap.xml do portal.")
    parser.add_argument("--output", default=DEFAULT_OUTPUT)
    parser.add_argument("--base-url", default=settings.server.public_base_url)
    args = parser.parse_args()
    asyncio.run(main(args.output, args.base_url))
