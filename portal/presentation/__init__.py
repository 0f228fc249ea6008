"""Camada de apresentação: rotas REST e schemas Pydantic."""
