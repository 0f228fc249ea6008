"""Schemas Pydantic da API."""
