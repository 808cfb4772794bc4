"""Interfaces PostService depends on.

The relational store and the cache are independent; PostService composes
one of each.
"""

from collections.abc import Sequence
from typing import Protocol

from blog.schemas.posts import PostRecord


class PostStore(Protocol):
    """Authoritative post persistence."""

    async def create_post(self, title: str, content: str, tags: Sequence[str]) -> PostRecord:
        """Insert a post and its "new_post" activity log atomically."""
        ...

    async def get_post_by_id(self, post_id: int) -> PostRecord:
        """Return the post or raise PostNotFoundError."""
        ...

    async def update_post(
        self, post_id: int, title: str, content: str, tags: Sequence[str]
    ) -> PostRecord:
        """Replace title/content/tags or raise PostNotFoundError."""
        ...

    async def find_posts_by_tag(self, tag: str) -> list[PostRecord]:
        ...

    async def search_full_text(self, query: str) -> list[PostRecord]:
        ...


class Cache(Protocol):
    """Key-value cache with per-key TTL. Errors raise CacheUnavailableError.

    `delete` also advances the key's generation; a `set` guarded by an older
    generation is dropped.
    """

    async def get(self, key: str) -> str | None:
        ...

    async def generation(self, key: str) -> str:
        ...

    async def set(self, key: str, value: str, ttl: int, *, generation: str | None = None) -> bool:
        ...

    async def delete(self, key: str) -> None:
        ...
