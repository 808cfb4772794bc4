"""Application settings via Pydantic Settings."""

from functools import lru_cache

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


def _asyncpg_connect_args(sslmode: str, command_timeout: float) -> dict[str, object]:
    """
    Compute asyncpg connect_args from libpq-style settings.

    asyncpg accepts the libpq sslmode names ("disable", "require",
    "verify-full", ...) directly as the `ssl` argument.
    """
    args: dict[str, object] = {"command_timeout": command_timeout}
    if sslmode:
        args["ssl"] = sslmode
    return args


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Blog API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=8000, validation_alias=AliasChoices("PORT", "LISTEN_PORT"))

    # Database (PostgreSQL)
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "password"
    db_name: str = "blog_db"
    db_sslmode: str = "disable"

    # Full URL wins over the discrete DB_* fields when set.
    database_url: str | None = None

    # Connection pool
    db_max_open_conns: int = Field(default=25, ge=1)
    db_max_idle_conns: int = Field(default=5, ge=1)
    db_conn_max_idle_time: int = Field(default=300, ge=1, description="Seconds before a pooled connection is recycled")
    db_pool_timeout: float = Field(default=30.0, gt=0, description="Seconds to wait for a free connection")
    db_command_timeout: float = Field(default=10.0, gt=0)

    @model_validator(mode="after")
    def _check_pool_sizes(self) -> "Settings":
        if self.db_max_idle_conns > self.db_max_open_conns:
            raise ValueError("DB_MAX_IDLE_CONNS cannot exceed DB_MAX_OPEN_CONNS")
        return self

    @property
    def async_database_url(self) -> str:
        """Get database URL with asyncpg driver.

        Accepts plain postgresql:// URLs and upgrades them to postgresql+asyncpg://.
        """
        if self.database_url:
            url = self.database_url
            if url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return url

        return URL.create(
            "postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        ).render_as_string(hide_password=False)

    @property
    def asyncpg_connect_args(self) -> dict[str, object]:
        """Extra connect args for asyncpg (sslmode, statement timeout)."""
        return _asyncpg_connect_args(self.db_sslmode, self.db_command_timeout)

    @property
    def engine_options(self) -> dict[str, object]:
        """Pool sizing for create_async_engine.

        Idle connections map to pool_size, the remainder of the open-connection
        budget to max_overflow. Callers queue for pool_timeout when exhausted.
        """
        return {
            "pool_size": self.db_max_idle_conns,
            "max_overflow": self.db_max_open_conns - self.db_max_idle_conns,
            "pool_recycle": self.db_conn_max_idle_time,
            "pool_timeout": self.db_pool_timeout,
            "pool_pre_ping": True,
        }

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_socket_timeout: float = Field(default=5.0, gt=0)

    @property
    def redis_url(self) -> str:
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # Cache-aside behaviour
    cache_ttl: int = Field(default=300, ge=1, description="Post cache entry TTL in seconds")
    request_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Upper bound in seconds for a single store or cache call",
    )
    startup_ping_timeout: float = Field(default=5.0, gt=0)

    migrate_on_startup: bool = Field(
        default=False,
        description="Run `alembic upgrade head` before serving",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
