"""Routers FastAPI do Portal."""
