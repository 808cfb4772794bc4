"""PostgreSQL-backed post repository.

Handles:
- Transactional create (post row + "new_post" activity log, all-or-nothing)
- Point lookup and full-replace update scoped by id
- Tag filter (TEXT[] containment) and ranked full-text search

Every SQLAlchemy/driver failure is logged and re-raised as a
StorageUnavailableError subclass; absence is PostNotFoundError.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from blog.errors import (
    ActivityLogInsertError,
    CommitError,
    PostInsertError,
    PostNotFoundError,
    StorageUnavailableError,
    TransactionBeginError,
)
from blog.models import ActivityAction, ActivityLog, Post
from blog.models.post import SEARCH_CONFIG
from blog.schemas.posts import PostRecord
from blog.stores.postgres import Database

logger = logging.getLogger("uvicorn.error")

# Driver-level connection failures (refused, reset) can surface unwrapped.
DB_ERRORS = (SQLAlchemyError, OSError)

_POST_COLUMNS = (Post.id, Post.title, Post.content, Post.tags, Post.created_at)


class PostgresPostStore:
    """Post persistence on a shared Database pool."""

    def __init__(self, db: Database):
        self._db = db

    async def create_post(self, title: str, content: str, tags: Sequence[str]) -> PostRecord:
        """Insert a post and its activity log in one transaction.

        The connection is held for both inserts and the commit; on any
        failure the transaction is rolled back and nothing is visible.

        Raises:
            TransactionBeginError: no connection / BEGIN failed.
            PostInsertError: the posts insert failed.
            ActivityLogInsertError: the activity_logs insert failed.
            CommitError: COMMIT failed.
        """
        tags = list(tags)
        async with self._db.session() as session:
            try:
                await session.begin()
                await session.connection()
            except DB_ERRORS as exc:
                logger.error(f"failed to begin transaction: {exc}")
                raise TransactionBeginError("failed to begin transaction") from exc

            try:
                result = await session.execute(
                    insert(Post)
                    .values(title=title, content=content, tags=tags)
                    .returning(Post.id, Post.created_at)
                )
                post_id, created_at = result.one()
            except DB_ERRORS as exc:
                await session.rollback()
                logger.error(f"failed to insert post: {exc}")
                raise PostInsertError("failed to insert post") from exc

            try:
                await session.execute(
                    insert(ActivityLog).values(
                        action=ActivityAction.NEW_POST.value,
                        post_id=post_id,
                        logged_at=func.now(),
                    )
                )
            except DB_ERRORS as exc:
                await session.rollback()
                logger.error(f"failed to insert activity log for post {post_id}: {exc}")
                raise ActivityLogInsertError("failed to insert activity log") from exc

            try:
                await session.commit()
            except DB_ERRORS as exc:
                logger.error(f"failed to commit post {post_id}: {exc}")
                raise CommitError("failed to commit transaction") from exc

        return PostRecord(id=post_id, title=title, content=content, tags=tags, created_at=created_at)

    async def get_post_by_id(self, post_id: int) -> PostRecord:
        try:
            async with self._db.get_session() as session:
                result = await session.execute(select(*_POST_COLUMNS).where(Post.id == post_id))
                row = result.one_or_none()
        except DB_ERRORS as exc:
            logger.error(f"error retrieving post {post_id}: {exc}")
            raise StorageUnavailableError("error retrieving post") from exc

        if row is None:
            raise PostNotFoundError(post_id)
        return PostRecord.model_validate(dict(row._mapping))

    async def update_post(
        self, post_id: int, title: str, content: str, tags: Sequence[str]
    ) -> PostRecord:
        """Replace title/content/tags of one post; id and created_at are kept."""
        stmt = (
            update(Post)
            .where(Post.id == post_id)
            .values(title=title, content=content, tags=list(tags))
            .returning(*_POST_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._db.get_session() as session:
                result = await session.execute(stmt)
                row = result.one_or_none()
        except DB_ERRORS as exc:
            logger.error(f"error updating post {post_id}: {exc}")
            raise StorageUnavailableError("error updating post") from exc

        if row is None:
            raise PostNotFoundError(post_id)
        return PostRecord.model_validate(dict(row._mapping))

    async def find_posts_by_tag(self, tag: str) -> list[PostRecord]:
        """All posts whose tags contain `tag`, oldest first."""
        stmt = select(*_POST_COLUMNS).where(Post.tags.contains([tag])).order_by(Post.id)
        return await self._fetch_all(stmt, "error finding posts by tag")

    async def search_full_text(self, query: str) -> list[PostRecord]:
        """Posts matching `query`, most relevant first (ties by id)."""
        ts_query = func.plainto_tsquery(SEARCH_CONFIG, query)
        stmt = (
            select(*_POST_COLUMNS)
            .where(Post.search_vector.op("@@")(ts_query))
            .order_by(func.ts_rank(Post.search_vector, ts_query).desc(), Post.id)
        )
        return await self._fetch_all(stmt, "error executing full-text search")

    async def _fetch_all(self, stmt, error_message: str) -> list[PostRecord]:
        try:
            async with self._db.get_session() as session:
                result = await session.execute(stmt)
                rows = result.all()
        except DB_ERRORS as exc:
            logger.error(f"{error_message}: {exc}")
            raise StorageUnavailableError(error_message) from exc

        return [PostRecord.model_validate(dict(row._mapping)) for row in rows]
