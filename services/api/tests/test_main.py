"""Startup/shutdown wiring (stores replaced with mocks)."""

import io
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from alembic import command
from fastapi import FastAPI

from blog import main as main_module
from blog.errors import CacheUnavailableError
from blog.migrations import SERVICE_ROOT, alembic_config
from blog.services.posts import PostService


@pytest.fixture
def fake_stores(monkeypatch: pytest.MonkeyPatch):
    db = MagicMock()
    db.ping = AsyncMock()
    db.dispose = AsyncMock()
    cache = MagicMock()
    cache.ping = AsyncMock()
    cache.close = AsyncMock()
    monkeypatch.setattr(main_module.Database, "from_settings", classmethod(lambda cls, s: db))
    monkeypatch.setattr(main_module.RedisCache, "from_settings", classmethod(lambda cls, s: cache))
    return db, cache


@pytest.mark.asyncio
async def test_lifespan_wires_post_service_and_releases_pools(fake_stores):
    db, cache = fake_stores
    app = FastAPI()

    async with main_module.lifespan(app):
        service = app.state.post_service
        assert isinstance(service, PostService)
        assert service.cache is cache
        assert service.cache_ttl == 300
        db.ping.assert_awaited_once()
        cache.ping.assert_awaited_once()

    cache.close.assert_awaited_once()
    db.dispose.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_fails_when_redis_is_down(fake_stores):
    db, cache = fake_stores
    cache.ping.side_effect = CacheUnavailableError("refused")

    with pytest.raises(CacheUnavailableError):
        async with main_module.lifespan(FastAPI()):
            pass

    db.dispose.assert_awaited_once()


def test_alembic_config_points_at_service_migrations():
    config = alembic_config()

    assert config.get_main_option("script_location") == str(SERVICE_ROOT / "alembic")
    assert (SERVICE_ROOT / "alembic.ini").exists()


def test_migrations_from_the_app_keep_server_logging(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG)
    root = logging.getLogger()
    handlers = list(root.handlers)
    config = alembic_config()
    config.output_buffer = io.StringIO()

    # Offline (--sql) mode runs alembic/env.py without a database.
    command.upgrade(config, "head", sql=True)

    assert config.attributes["configure_logger"] is False
    assert "CREATE TABLE posts" in config.output_buffer.getvalue()
    assert root.level == logging.DEBUG
    assert root.handlers == handlers
