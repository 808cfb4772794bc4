"""PostgreSQL store with async SQLAlchemy.

Handles:
- Engine and connection pool lifecycle
- Session factory for repositories
- Startup ping with a deadline
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from blog.settings import Settings

logger = logging.getLogger("uvicorn.error")


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class Database:
    """Process-wide connection pool, constructed at startup and passed around."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Create the engine with the configured pool bounds."""
        engine = create_async_engine(
            settings.async_database_url,
            echo=settings.debug,
            connect_args=settings.asyncpg_connect_args,
            **settings.engine_options,
        )
        return cls(engine)

    def session(self) -> AsyncSession:
        """Open a new session. Use as `async with db.session() as session:`."""
        return self._session_factory()

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session context manager that commits on success.

        Usage:
            async with db.get_session() as session:
                result = await session.execute(query)
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self, timeout: float = 5.0) -> None:
        """Open a connection and run SELECT 1 within `timeout` seconds."""

        async def _ping() -> None:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

        await asyncio.wait_for(_ping(), timeout=timeout)
        logger.info("Postgres connected")

    async def dispose(self) -> None:
        """Close database connection pool."""
        await self.engine.dispose()

    async def create_tables(self) -> None:
        """Create all tables (for development/testing only)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        """Drop all tables (for testing only)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
