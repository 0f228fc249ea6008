"""
Database Engine Factory e Session Management com SQLModel + Async.

Este módulo fornece:
- Engine singleton com suporte dual SQLite/PostgreSQL
- AsyncSession factory para injeção de dependência
- Context managers para uso em services, scripts e routes
"""
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from portal import domain  # noqa: F401 - registra as tabelas no metadata
from ..config.logging_config import db_logger as logger
from ..config.settings import settings


def _create_engine():
    """
    Cria engine assíncrono baseado na configuração.

    SQLite: Usa aiosqlite com pool básico
    PostgreSQL: Usa asyncpg com pool dimensionado
    """
    db_url = settings.database.async_url

    if settings.database.is_postgres:
        return create_async_engine(
            db_url,
            echo=settings.features.debug_mode,
            pool_pre_ping=True,
            pool_size=10,
            max_overflow=20,
            pool_recycle=3600,
            pool_timeout=30,
        )
    return create_async_engine(
        db_url,
        echo=settings.features.debug_mode,
        connect_args={"check_same_thread": False},
    )


# Engine singleton (lazy init via função para evitar problemas de import)
_engine = None


def get_engine():
    """Retorna engine singleton, criando se necessário."""
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_maker():
    """Retorna async session maker configurado."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,  # Evita lazy loading após commit
    )


async def init_db():
    """
    Cria tabelas se não existirem (útil para dev/SQLite).
    Em produção PostgreSQL, usar Alembic migrations.
    """
    if not settings.database.is_postgres:
        os.makedirs(os.path.dirname(settings.database.path), exist_ok=True)

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Schema verificado (%d tabelas)", len(SQLModel.metadata.tables))


async def close_db():
    """Fecha conexões do pool graciosamente."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager para sessão do banco.

    Uso:
        async with get_session() as session:
            result = await session.execute(...)
    """
    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI Depends para injeção de sessão.

    Uso em routes:
        @router.get("/items")
        async def get_items(session: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_session() as session:
        yield session
