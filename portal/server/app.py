"""
Módulo do Servidor (API Handler).

Define a aplicação FastAPI, rotas da API e ciclo de vida do servidor.
Responsável por:
1. Inicializar recursos globais (banco, Redis) no startup.
2. Registrar os routers sob o prefixo /api.
3. Gerenciar tratamento de erros e respostas JSON.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy.exc import IntegrityError

from portal.config import setup_logging
from portal.config.exceptions import PortalError
from portal.config.settings import settings
from portal.infrastructure.db_engine import close_db, init_db
from portal.infrastructure.redis_client import redis_cache
from portal.presentation.routes import admin, auth, dedications, memorials, payments, system, webhooks
from portal.server.error_handlers import (
    generic_exception_handler,
    integrity_exception_handler,
    portal_exception_handler,
)
from portal.server.middleware import SessionMiddleware

setup_logging(logging.DEBUG if settings.features.debug_mode else logging.INFO)
logger = logging.getLogger("server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.database.is_postgres:
        # Em Postgres, o schema é gerenciado apenas por Alembic
        logger.info("Database: PostgreSQL (migrations via Alembic)")
    else:
        await init_db()
        logger.info("Database: SQLite em %s", settings.database.path)

    if settings.cache.enable_redis:
        await redis_cache.connect()

    yield

    # Shutdown
    logger.info("Shutting down...")
    await redis_cache.close()
    await close_db()


app = FastAPI(
    title="Portal da Lembrança API",
    version=settings.server.version,
    lifespan=lifespan,
)

# --- Global Exception Handlers ---
app.add_exception_handler(PortalError, portal_exception_handler)
app.add_exception_handler(IntegrityError, integrity_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# --- Middleware ---
app.add_middleware(GZipMiddleware, minimum_size=1000, compresslevel=1)

# Sessão (cookie/Bearer) -> request.state.principal
app.add_middleware(SessionMiddleware)

# CORS por último para envolver inclusive erros do middleware de sessão
cors_origins = settings.server.cors_allowed_origins or [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
]

cors_allow_origin_regex = None
if settings.server.env == "development":
    cors_allow_origin_regex = r"^https?://(?:localhost|127\.0\.0\.1|\d{1,3}(?:\.\d{1,3}){3})(?::\d+)?$"

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_origin_regex=cors_allow_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers ---
app.include_router(system.router, prefix="/api")
app.include_router(auth.router, prefix="/api")
app.include_router(memorials.router, prefix="/api")
app.include_router(memorials.content_router, prefix="/api")
app.include_router(dedications.router, prefix="/api")
app.include_router(payments.router, prefix="/api")
app.include_router(webhooks.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
app.include_router(admin.leads_router, prefix="/api")
app.include_router(system.sitemap_router)
