"""Redis store for caching.

Handles:
- Caching with TTL policies
- Translating Redis failures into CacheUnavailableError

TTL policies:
- Post snapshots: 5 minutes
- Invalidation generations: 1 hour

Every delete bumps a per-key generation counter (`post:<id>:gen`). A reader
that captured the generation before loading from PostgreSQL may only
populate while the counter is unchanged, so a snapshot loaded before an
update committed cannot land after that update's invalidation.

Redis is never the system of record; callers degrade to PostgreSQL on
any failure reported here.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from blog.errors import CacheUnavailableError
from blog.settings import Settings

# TTL constants (in seconds)
TTL_POST = 300  # 5 minutes
TTL_GENERATION = 3600  # 1 hour; must outlive any single read

# Key prefixes
PREFIX_POST = "post:"
SUFFIX_GENERATION = ":gen"

# KEYS[1] = value key, KEYS[2] = generation key
# ARGV[1] = ttl, ARGV[2] = value, ARGV[3] = expected generation
SET_IF_GENERATION = """
local current = redis.call("get", KEYS[2]) or "0"
if current == ARGV[3] then
    redis.call("setex", KEYS[1], ARGV[1], ARGV[2])
    return 1
end
return 0
"""

logger = logging.getLogger("uvicorn.error")


def post_cache_key(post_id: int) -> str:
    """Cache key for a post snapshot, e.g. `post:42`."""
    return f"{PREFIX_POST}{post_id}"


def generation_key(key: str) -> str:
    return f"{key}{SUFFIX_GENERATION}"


class RedisCache:
    """Thin async Redis wrapper with a uniform error type."""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisCache":
        client = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=settings.redis_socket_timeout,
            socket_timeout=settings.redis_socket_timeout,
        )
        return cls(client)

    async def ping(self) -> None:
        """Validate connectivity early."""
        try:
            await self.client.ping()
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"redis ping failed: {exc}") from exc
        logger.info("Redis connected")

    async def close(self) -> None:
        """Close Redis connection."""
        await self.client.aclose()

    # ============================================================
    # Generic cache operations
    # ============================================================

    async def get(self, key: str) -> str | None:
        """Get value from cache.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found.

        Raises:
            CacheUnavailableError: Redis could not be reached or replied with an error.
        """
        try:
            return await self.client.get(key)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"cache get {key} failed: {exc}") from exc

    async def generation(self, key: str) -> str:
        """Current invalidation generation of `key` ("0" if never invalidated)."""
        try:
            current = await self.client.get(generation_key(key))
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"cache generation {key} failed: {exc}") from exc
        return current or "0"

    async def set(self, key: str, value: str, ttl: int, *, generation: str | None = None) -> bool:
        """Set value in cache with TTL.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time-to-live in seconds.
            generation: When given, only write if `key` has not been
                invalidated since this generation was read.

        Returns:
            False if the write was skipped because of a newer invalidation.
        """
        try:
            if generation is None:
                await self.client.setex(key, ttl, value)
                return True
            written = await self.client.eval(
                SET_IF_GENERATION, 2, key, generation_key(key), ttl, value, generation
            )
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"cache set {key} failed: {exc}") from exc
        return bool(written)

    async def delete(self, key: str) -> None:
        """Delete value from cache and bump its generation.

        Both happen in one MULTI/EXEC so no conditional set can slip in
        between them.

        Args:
            key: Cache key.
        """
        gen_key = generation_key(key)
        pipe = self.client.pipeline(transaction=True)
        pipe.delete(key)
        pipe.incr(gen_key)
        pipe.expire(gen_key, TTL_GENERATION)
        try:
            await pipe.execute()
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"cache delete {key} failed: {exc}") from exc
