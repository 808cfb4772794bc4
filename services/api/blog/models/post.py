"""Post model.

A blog post with free-form tags and a stored full-text search vector
over title + content.
"""

from datetime import datetime

from sqlalchemy import Computed, DateTime, Index, Text, func
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.orm import Mapped, mapped_column

from blog.models.tags import TagArray
from blog.stores.postgres import Base

SEARCH_CONFIG = "english"
SEARCH_VECTOR_SQL = f"to_tsvector('{SEARCH_CONFIG}', coalesce(title, '') || ' ' || coalesce(content, ''))"


class Post(Base):
    """Blog post row."""

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_tags", "tags", postgresql_using="gin"),
        Index("ix_posts_search_vector", "search_vector", postgresql_using="gin"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(Text)
    content: Mapped[str] = mapped_column(Text)

    # TEXT[]; NULL when the post has no tags
    tags: Mapped[list[str]] = mapped_column(TagArray, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    # Maintained by PostgreSQL; never loaded into the entity
    search_vector: Mapped[str | None] = mapped_column(
        TSVECTOR,
        Computed(SEARCH_VECTOR_SQL, persisted=True),
        deferred=True,
    )

    def __repr__(self) -> str:
        return f"<Post {self.id} {self.title!r}>"
