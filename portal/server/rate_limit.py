"""
Rate limiting para endpoints sujeitos a abuso (login e dedicatorias publicas).

Implementacao local (in-memory) com janela deslizante por chave.
Com multiplos workers cada processo conta isoladamente.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from math import ceil

from fastapi import HTTPException


class SlidingWindowRateLimiter:
    """Rate limiter por chave usando janela deslizante."""

    def __init__(self, window_seconds: int = 60):
        self.window_seconds = window_seconds
        self._hits: dict[str, deque[float]] = {}
        self._lock = asyncio.Lock()
        self._last_sweep_at = 0.0

    @staticmethod
    def _drop_expired(bucket: deque[float], cutoff: float) -> None:
        while bucket and bucket[0] <= cutoff:
            bucket.popleft()

    def _sweep(self, cutoff: float, now: float) -> None:
        # Varre chaves inativas no maximo uma vez por janela
        if now - self._last_sweep_at < self.window_seconds:
            return
        for key in list(self._hits):
            self._drop_expired(self._hits[key], cutoff)
            if not self._hits[key]:
                del self._hits[key]
        self._last_sweep_at = now

    async def consume(self, key: str, limit: int) -> tuple[bool, int]:
        """
        Registra 1 requisicao para a chave.

        Returns:
            (allowed, retry_after_seconds)
        """
        now = time.monotonic()
        cutoff = now - self.window_seconds

        async with self._lock:
            self._sweep(cutoff, now)
            bucket = self._hits.setdefault(key, deque())
            self._drop_expired(bucket, cutoff)

            if len(bucket) >= limit:
                retry_after = max(1, ceil(self.window_seconds - (now - bucket[0])))
                return False, retry_after

            bucket.append(now)
            return True, 0

    def reset(self) -> None:
        """Limpa estado interno. Util para testes."""
        self._hits.clear()
        self._last_sweep_at = 0.0


async def enforce_rate_limit(
    limiter: SlidingWindowRateLimiter,
    key: str,
    limit: int,
    detail: str = "Muitas tentativas. Aguarde e tente novamente.",
) -> None:
    """Levanta 429 com Retry-After quando a chave excede o limite."""
    allowed, retry_after = await limiter.consume(key, limit)
    if not allowed:
        raise HTTPException(
            status_code=429,
            detail=detail,
            headers={"Retry-After": str(retry_after)},
        )


login_rate_limiter = SlidingWindowRateLimiter(window_seconds=60)
dedication_rate_limiter = SlidingWindowRateLimiter(window_seconds=60)
