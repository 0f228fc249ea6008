"""
Popula os memoriais históricos (personalidades sepultadas em Pernambuco).

Cada registro é gravado como ativo, público e histórico. Rodar de novo
atualiza os memoriais existentes pelo slug, sem duplicar.

Uso:
    python scripts/seed_historical_memorials.py
    python scripts/seed_historical_memorials.py --data caminho/para/arquivo.json
"""

import argparse
import asyncio
import json
import os
import sys

# Adicionar root ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from portal.config.constants import MemorialStatus, MemorialVisibility  # noqa: E402
from portal.domain.sqlmodels import Memorial  # noqa: E402
from portal.infrastructure.db_engine import close_db, get_session, init_db  # noqa: E402
from portal.infrastructure.repositories.memorial_repository import MemorialRepository  # noqa: E402
from portal.services.memorial_service import clear_memorial_cache  # noqa: E402

DEFAULT_DATA_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "historical_memorials.json")

_SEED_FIELDS = (
    "full_name",
    "birth_date",
    "death_date",
    "birthplace",
    "filiation",
    "biography",
    "main_photo",
    "category",
    "grave_location",
)


def load_records(path: str) -> list[dict]:
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)
    missing = [r for r in records if not r.get("slug") or not r.get("full_name")]
    if missing:
        raise ValueError(f"{len(missing)} registro(s) sem slug ou full_name em {path}")
    return records


async def seed(records: list[dict]) -> tuple[int, int]:
    created = updated = 0
    async with get_session() as session:
        repo = MemorialRepository(session)
        for record in records:
            fields = {name: record.get(name) for name in _SEED_FIELDS}
            fields.update(
                visibility=MemorialVisibility.PUBLIC.value,
                status=MemorialStatus.ACTIVE.value,
                is_historical=True,
            )

            existing = await repo.get_by_slug(record["slug"])
            if existing is None:
                await repo.create(Memorial(slug=record["slug"], **fields))
                created += 1
                print(f"  + {record['slug']}")
            else:
                await repo.update_fields(existing, fields)
                updated += 1
                print(f"  ~ {record['slug']}")
    return created, updated


async def main(data_file: str) -> None:
    records = load_records(data_file)
    print(f"🌱 Semeando {len(records)} memoriais históricos...")

    await init_db()
    try:
        created, updated = await seed(records)
        await clear_memorial_cache()
    finally:
        await close_db()

    print(f"✅ Concluído: {created} criados, {updated} atualizados.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Popula os memoriais históricos.")
    parser.add_argument("--data", default=DEFAULT_DATA_FILE, help="Arquivo JSON com os memoriais")
    args = parser.parse_args()
    asyncio.run(main(args.data))
