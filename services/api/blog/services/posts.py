"""Post service: cache-aside reads over PostgreSQL + Redis.

Flow (point read):
1. Check Redis for `post:<id>`
2. On hit, decode the snapshot (a corrupt snapshot counts as a miss)
3. On miss or Redis failure, load from PostgreSQL
4. Populate Redis with a 5 minute TTL (best effort) and return

Writes go to PostgreSQL first and then delete the cached snapshot. The
write path never sets the cache, so a slow writer cannot overwrite a newer
value; the next read repopulates from the store.

A read that loaded the old row before an update committed must not put it
back after the update's delete. The reader captures the key's invalidation
generation before querying PostgreSQL and populates only if it is still
current (see blog.stores.redis).

Tag filter and full-text search go straight to PostgreSQL: their result
sets are query-shaped and unbounded, so they are never cached.
"""

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from typing import TypeVar

from pydantic import ValidationError

from blog.errors import CacheUnavailableError, InvalidInputError, StorageUnavailableError
from blog.schemas.posts import PostRecord
from blog.stores.base import Cache, PostStore
from blog.stores.redis import TTL_POST, post_cache_key

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")


class PostService:
    """Composes a post store and a cache."""

    def __init__(
        self,
        store: PostStore,
        cache: Cache,
        *,
        cache_ttl: int = TTL_POST,
        timeout: float | None = None,
    ):
        self.store = store
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.timeout = timeout

    async def get_and_cache(self, post_id: int) -> PostRecord:
        """Get a post, preferring the cached snapshot.

        Args:
            post_id: Post identifier.

        Returns:
            The post.

        Raises:
            PostNotFoundError: No such post in the store.
            StorageUnavailableError: Cache missed and the store failed.
        """
        key = post_cache_key(post_id)

        cached = await self._try_cache_get(key)
        if cached is not None:
            try:
                return PostRecord.model_validate_json(cached)
            except ValidationError as exc:
                logger.warning(f"Cache entry {key} is corrupt, reading from store: {exc}")

        # Captured before the store read so a concurrent invalidation is detected.
        generation = await self._try_cache_generation(key)
        post = await self._store_call(self.store.get_post_by_id(post_id))

        if generation is not None:
            await self._try_cache_set(key, post, generation)

        return post

    async def create(self, title: str, content: str, tags: Sequence[str]) -> PostRecord:
        """Create a post (and its activity log). The cache is not touched."""
        return await self._store_call(self.store.create_post(title, content, tags))

    async def update(
        self, post_id: int, title: str, content: str, tags: Sequence[str]
    ) -> PostRecord:
        """Replace a post, then invalidate its cached snapshot."""
        post = await self._store_call(self.store.update_post(post_id, title, content, tags))

        # The row is committed; finish invalidating even if the caller is cancelled.
        await asyncio.shield(self._invalidate(post_cache_key(post_id)))

        return post

    async def find_by_tag(self, tag: str) -> list[PostRecord]:
        tag = tag.strip()
        if not tag:
            raise InvalidInputError("tag must not be blank")
        return await self._store_call(self.store.find_posts_by_tag(tag))

    async def search(self, query: str) -> list[PostRecord]:
        query = query.strip()
        if not query:
            raise InvalidInputError("search query must not be blank")
        return await self._store_call(self.store.search_full_text(query))

    async def _try_cache_get(self, key: str) -> str | None:
        try:
            return await self._cache_call(self.cache.get(key))
        except CacheUnavailableError as exc:
            logger.warning(f"Cache get error for {key}, falling back to store: {exc}")
            return None

    async def _try_cache_generation(self, key: str) -> str | None:
        try:
            return await self._cache_call(self.cache.generation(key))
        except CacheUnavailableError as exc:
            logger.warning(f"Cache generation error for {key}, not populating: {exc}")
            return None

    async def _try_cache_set(self, key: str, post: PostRecord, generation: str) -> None:
        try:
            stored = await self._cache_call(
                self.cache.set(key, post.model_dump_json(), self.cache_ttl, generation=generation)
            )
        except CacheUnavailableError as exc:
            logger.warning(f"Cache set error for {key}: {exc}")
            return
        if not stored:
            logger.info(f"Skipped caching {key}: invalidated during read")

    async def _invalidate(self, key: str) -> None:
        try:
            await self._cache_call(self.cache.delete(key))
        except CacheUnavailableError as exc:
            # Stale reads possible for up to the TTL.
            logger.warning(f"Cache invalidation failed for {key}: {exc}")

    async def _store_call(self, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.error(f"Store call timed out after {self.timeout}s")
            raise StorageUnavailableError("store call timed out") from exc

    async def _cache_call(self, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise CacheUnavailableError(f"cache call timed out after {self.timeout}s") from exc
