"""Shared fixtures: in-memory stand-ins for the post store and the cache."""

from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from blog.deps import get_post_service
from blog.errors import CacheUnavailableError, PostNotFoundError
from blog.main import app
from blog.schemas import PostRecord
from blog.services.posts import PostService


class InMemoryPostStore:
    """Dict-backed store that counts calls per operation."""

    def __init__(self) -> None:
        self.rows: dict[int, PostRecord] = {}
        self.activity_logs: list[tuple[str, int]] = []
        self.calls: Counter[str] = Counter()
        self.fail_with: Exception | None = None
        self._next_id = 1

    def _check(self, op: str) -> None:
        self.calls[op] += 1
        if self.fail_with is not None:
            raise self.fail_with

    async def create_post(self, title: str, content: str, tags: Sequence[str]) -> PostRecord:
        self._check("create_post")
        post = PostRecord(
            id=self._next_id,
            title=title,
            content=content,
            tags=list(tags),
            created_at=datetime.now(timezone.utc),
        )
        self._next_id += 1
        self.rows[post.id] = post
        self.activity_logs.append(("new_post", post.id))
        return post

    async def get_post_by_id(self, post_id: int) -> PostRecord:
        self._check("get_post_by_id")
        if post_id not in self.rows:
            raise PostNotFoundError(post_id)
        return self.rows[post_id]

    async def update_post(
        self, post_id: int, title: str, content: str, tags: Sequence[str]
    ) -> PostRecord:
        self._check("update_post")
        if post_id not in self.rows:
            raise PostNotFoundError(post_id)
        post = self.rows[post_id].model_copy(
            update={"title": title, "content": content, "tags": list(tags)}
        )
        self.rows[post_id] = post
        return post

    async def find_posts_by_tag(self, tag: str) -> list[PostRecord]:
        self._check("find_posts_by_tag")
        return [p for p in self.rows.values() if tag in p.tags]

    async def search_full_text(self, query: str) -> list[PostRecord]:
        self._check("search_full_text")
        term = query.lower()
        hits = [p for p in self.rows.values() if term in f"{p.title} {p.content}".lower()]
        return sorted(hits, key=lambda p: -f"{p.title} {p.content}".lower().count(term))


class InMemoryCache:
    """Dict-backed cache with Redis-like generations; each operation can be switched to fail."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.generations: dict[str, int] = {}
        self.fail_get = False
        self.fail_set = False
        self.fail_delete = False

    async def get(self, key: str) -> str | None:
        if self.fail_get:
            raise CacheUnavailableError("connection refused")
        return self.data.get(key)

    async def generation(self, key: str) -> str:
        if self.fail_get:
            raise CacheUnavailableError("connection refused")
        return str(self.generations.get(key, 0))

    async def set(self, key: str, value: str, ttl: int, *, generation: str | None = None) -> bool:
        if self.fail_set:
            raise CacheUnavailableError("connection refused")
        if generation is not None and generation != str(self.generations.get(key, 0)):
            return False
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, key: str) -> None:
        if self.fail_delete:
            raise CacheUnavailableError("connection refused")
        self.data.pop(key, None)
        self.ttls.pop(key, None)
        self.generations[key] = self.generations.get(key, 0) + 1


@pytest.fixture
def store() -> InMemoryPostStore:
    return InMemoryPostStore()


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def service(store: InMemoryPostStore, cache: InMemoryCache) -> PostService:
    return PostService(store, cache, timeout=1.0)


@pytest.fixture
async def client(service: PostService):
    """Create test client wired to the in-memory service."""
    app.dependency_overrides[get_post_service] = lambda: service
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
