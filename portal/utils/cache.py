from __future__ import annotations

import asyncio
import time
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """
    Cache em memória com expiração fixa por entrada.

    Não há invalidação automática: quem escreve chama `clear()`.
    """

    def __init__(self, ttl_seconds: float = 60):
        self.ttl_seconds = ttl_seconds
        self._entries: dict[str, tuple[float, T]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[T]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if time.monotonic() >= expires_at:
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: T) -> None:
        async with self._lock:
            self._entries[key] = (time.monotonic() + self.ttl_seconds, value)

    def clear(self) -> int:
        """Remove todas as entradas e devolve quantas havia."""
        removed = len(self._entries)
        self._entries.clear()
        return removed

    def __len__(self) -> int:
        return len(self._entries)
