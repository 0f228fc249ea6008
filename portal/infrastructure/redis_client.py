"""
Redis cache client for shared L2 caching.

Compartilha a listagem pública de memoriais entre workers quando
`cache.enable_redis` está ativo; sem Redis, o cache em memória basta.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

import orjson
import redis.asyncio as aioredis

from portal.config.logging_config import service_logger as logger
from portal.config.settings import settings

MEMORIAL_LIST_KEY = "portal:memorials:public"


@dataclass
class RedisCache:
    url: str
    enabled: bool
    memorial_list_ttl: int
    _client: Any = field(default=None, repr=False)

    async def connect(self) -> None:
        if not self.enabled:
            return
        if self._client is not None:
            return
        self._client = aioredis.from_url(
            self.url,
            decode_responses=False,
            socket_connect_timeout=2,
            socket_timeout=1,
            health_check_interval=30,
        )
        try:
            await self._client.ping()
            logger.info("Redis connected")
        except Exception as exc:
            logger.warning("Redis connect failed: %s", exc)
            self._client = None

    async def close(self) -> None:
        if self._client is None:
            return
        try:
            await self._client.aclose()
        except Exception as exc:
            logger.warning("Redis close failed: %s", exc)
        finally:
            self._client = None

    @property
    def available(self) -> bool:
        return self._client is not None

    async def get_json(self, key: str) -> Any:
        if self._client is None:
            return None
        try:
            payload = await self._client.get(key)
            if payload is None:
                return None
            return orjson.loads(payload)
        except Exception as exc:
            logger.debug("Redis get failed (%s): %s", key, exc)
            return None

    async def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        if self._client is None:
            return
        try:
            payload = orjson.dumps(value)
            await self._client.set(key, payload, ex=ttl_seconds)
        except Exception as exc:
            logger.debug("Redis set failed (%s): %s", key, exc)

    async def delete(self, key: str) -> None:
        if self._client is None:
            return
        try:
            await self._client.delete(key)
        except Exception as exc:
            logger.debug("Redis delete failed (%s): %s", key, exc)

    async def get_memorial_list(self) -> Optional[List[dict]]:
        return await self.get_json(MEMORIAL_LIST_KEY)

    async def set_memorial_list(self, value: List[dict]) -> None:
        await self.set_json(MEMORIAL_LIST_KEY, value, self.memorial_list_ttl)

    async def clear_memorial_list(self) -> None:
        await self.delete(MEMORIAL_LIST_KEY)


redis_cache = RedisCache(
    url=settings.cache.redis_url,
    enabled=settings.cache.enable_redis,
    memorial_list_ttl=settings.cache.memorial_list_ttl,
)
