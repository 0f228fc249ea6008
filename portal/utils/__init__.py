"""Utilitários compartilhados (slugs, senhas, QR Code, cache, auth)."""
