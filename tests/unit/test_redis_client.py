import orjson
import pytest

from portal.infrastructure import redis_client as redis_mod

pytestmark = pytest.mark.unit


class _FakeRedis:
    def __init__(self):
        self.store = {}
        self.set_calls = []
        self.deleted = []
        self.closed = False
        self.fail_get = False
        self.fail_set = False
        self.fail_ping = False
        self.fail_close = False

    async def ping(self):
        if self.fail_ping:
            raise RuntimeError("ping failed")

    async def aclose(self):
        if self.fail_close:
            raise RuntimeError("close failed")
        self.closed = True

    async def get(self, key):
        if self.fail_get:
            raise RuntimeError("get failed")
        return self.store.get(key)

    async def set(self, key, value, ex):
        if self.fail_set:
            raise RuntimeError("set failed")
        self.set_calls.append((key, value, ex))
        self.store[key] = value

    async def delete(self, key):
        self.deleted.append(key)
        self.store.pop(key, None)


def _cache() -> redis_mod.RedisCache:
    return redis_mod.RedisCache(url="redis://localhost:6379/0", enabled=True, memorial_list_ttl=60)


@pytest.mark.asyncio
async def test_connect_skips_when_disabled():
    cache = redis_mod.RedisCache("redis://localhost", enabled=False, memorial_list_ttl=60)
    await cache.connect()
    assert cache.available is False
    assert await cache.get_memorial_list() is None


@pytest.mark.asyncio
async def test_connect_drops_client_when_ping_fails(monkeypatch):
    fake = _FakeRedis()
    fake.fail_ping = True
    monkeypatch.setattr(redis_mod.aioredis, "from_url", lambda *_args, **_kwargs: fake)

    cache = _cache()
    await cache.connect()
    assert cache.available is False


@pytest.mark.asyncio
async def test_memorial_list_round_trip_uses_configured_ttl(monkeypatch):
    fake = _FakeRedis()
    monkeypatch.setattr(redis_mod.aioredis, "from_url", lambda *_args, **_kwargs: fake)

    cache = _cache()
    await cache.connect()
    await cache.set_memorial_list([{"slug": "capiba"}])

    key, payload, ttl = fake.set_calls[0]
    assert key == redis_mod.MEMORIAL_LIST_KEY
    assert orjson.loads(payload) == [{"slug": "capiba"}]
    assert ttl == 60
    assert await cache.get_memorial_list() == [{"slug": "capiba"}]

    await cache.clear_memorial_list()
    assert fake.deleted == [redis_mod.MEMORIAL_LIST_KEY]
    assert await cache.get_memorial_list() is None


@pytest.mark.asyncio
async def test_get_and_set_failures_are_soft():
    fake = _FakeRedis()
    fake.fail_get = True
    fake.fail_set = True

    cache = _cache()
    cache._client = fake
    await cache.set_json("k", {"a": 1}, 10)
    assert await cache.get_json("k") is None


@pytest.mark.asyncio
async def test_close_resets_client_even_when_close_fails():
    fake = _FakeRedis()
    fake.fail_close = True

    cache = _cache()
    cache._client = fake
    await cache.close()
    assert cache.available is False
