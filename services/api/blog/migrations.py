"""Programmatic Alembic upgrade used when MIGRATE_ON_STARTUP is set."""

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

logger = logging.getLogger("uvicorn.error")

# services/api/ (holds alembic.ini and alembic/)
SERVICE_ROOT = Path(__file__).resolve().parents[1]


def alembic_config() -> Config:
    config = Config(str(SERVICE_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(SERVICE_ROOT / "alembic"))
    # Read by alembic/env.py: leave the server's logging setup alone.
    config.attributes["configure_logger"] = False
    return config


def run_migrations(revision: str = "head") -> None:
    """Upgrade the schema. Blocking: call via asyncio.to_thread from async code.

    alembic/env.py drives its own event loop, so this must not run on the
    server's loop thread.
    """
    logger.info(f"Running migrations to {revision}")
    command.upgrade(alembic_config(), revision)
