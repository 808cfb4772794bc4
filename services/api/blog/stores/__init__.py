"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: engine/pool, post repository, ORM operations
- Redis: cached post snapshots with TTL

No cache-aside orchestration in stores - that belongs in services.
"""
