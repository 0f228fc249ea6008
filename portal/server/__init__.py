"""Servidor HTTP: app FastAPI, middleware, dependências e handlers."""
