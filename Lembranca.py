#!/usr/bin/env python3
"""
Portal da Lembrança - Servidor da API
=====================================

Entry point da aplicação.
Execute com: python Lembranca.py

Para popular os memoriais históricos, execute:
    python scripts/seed_historical_memorials.py

Arquitetura:
    portal/
    ├── config/         # Settings, constantes, exceções, logging
    ├── domain/         # Tabelas SQLModel
    ├── infrastructure/ # Banco, Redis, repositories, gateway de pagamento
    ├── services/       # Regras de negócio
    ├── presentation/   # Routers e schemas da API
    └── server/         # App FastAPI, middleware e handlers
"""

import os

import uvicorn
from dotenv import load_dotenv

# Variáveis do .env antes de importar as settings
load_dotenv()


def main():
    from portal.config.settings import settings

    project_root = os.path.dirname(os.path.abspath(__file__))
    reload_enabled = os.getenv("PORTAL_RELOAD", "1").lower() not in {"0", "false", "no"}

    print(f"Starting Portal da Lembrança on http://{settings.server.host}:{settings.server.port}")

    uvicorn.run(
        "portal.server.app:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=reload_enabled,
        reload_dirs=[os.path.join(project_root, "portal")],
    )


if __name__ == "__main__":
    main()
