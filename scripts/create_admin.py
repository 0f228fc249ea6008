"""
Cria (ou redefine a senha de) um administrador do portal.

Uso:
    python scripts/create_admin.py --email admin@portal.com --name "Equipe Portal"
    python scripts/create_admin.py --email admin@portal.com --password "nova-senha"

Sem --password, a senha é pedida no terminal.
"""

import argparse
import asyncio
import getpass
import os
import sys

# Adicionar root ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from portal.config.exceptions import ValidationError  # noqa: E402
from portal.domain.sqlmodels import AdminUser  # noqa: E402
from portal.infrastructure.db_engine import close_db, get_session, init_db  # noqa: E402
from portal.infrastructure.repositories.account_repository import AdminUserRepository  # noqa: E402
from portal.utils.dates import utcnow  # noqa: E402
from portal.utils.passwords import hash_password, validate_password_strength  # noqa: E402


async def upsert_admin(email: str, name: str, password: str) -> bool:
    """Retorna True quando o administrador foi criado, False quando atualizado."""
    password_hash = hash_password(password)
    async with get_session() as session:
        repo = AdminUserRepository(session)
        admin = await repo.get_by_email(email)
        if admin is None:
            await repo.create(AdminUser(email=email, name=name, password_hash=password_hash))
            return True

        admin.password_hash = password_hash
        admin.name = name or admin.name
        admin.is_active = True
        admin.updated_at = utcnow()
        session.add(admin)
        return False


async def main(args: argparse.Namespace) -> int:
    email = args.email.strip().lower()
    password = args.password or getpass.getpass("Senha do administrador: ")
    try:
        password = validate_password_strength(password)
    except ValidationError as e:
        print(f"⚠️ Erro: {e.message}")
        return 1

    await init_db()
    try:
        created = await upsert_admin(email, args.name, password)
    finally:
        await close_db()

    if created:
        print(f"✅ Administrador {email} criado.")
    else:
        print(f"✅ Senha do administrador {email} redefinida.")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Cria ou redefine um administrador.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Administrador")
    parser.add_argument("--password", default=None)
    sys.exit(asyncio.run(main(parser.parse_args())))
