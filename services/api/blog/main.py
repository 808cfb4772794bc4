"""FastAPI application entry point.

Blog API - posts with tags, cache-aside reads and full-text search.
"""

import asyncio
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog.errors import InvalidInputError, PostNotFoundError, StorageUnavailableError
from blog.migrations import run_migrations
from blog.routes import api_router
from blog.schemas import ErrorDetail, ErrorResponse
from blog.services.posts import PostService
from blog.settings import get_settings
from blog.stores.postgres import Database
from blog.stores.posts import PostgresPostStore
from blog.stores.redis import RedisCache

logger = logging.getLogger("uvicorn.error")


def _error(status_code: int, code: str, message: str, detail: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the Postgres pool and the Redis client, verifies both with a timed
    ping, and wires them into the PostService. The service does not start
    without its stores.
    """
    # Startup
    settings = get_settings()

    db = Database.from_settings(settings)
    try:
        await db.ping(timeout=settings.startup_ping_timeout)
    except Exception:
        logger.exception("Postgres init failed")
        await db.dispose()
        raise

    if settings.migrate_on_startup:
        await asyncio.to_thread(run_migrations)

    cache = RedisCache.from_settings(settings)
    try:
        await asyncio.wait_for(cache.ping(), timeout=settings.startup_ping_timeout)
    except Exception:
        logger.exception("Redis init failed")
        await cache.close()
        await db.dispose()
        raise

    app.state.post_service = PostService(
        PostgresPostStore(db),
        cache,
        cache_ttl=settings.cache_ttl,
        timeout=settings.request_timeout,
    )

    yield

    # Shutdown
    await cache.close()
    await db.dispose()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Posts with tags, cache-aside reads and full-text search",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed body, id or query parameter -> 400."""
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return _error(400, "INVALID_INPUT", "Invalid request", {"errors": errors})

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
        return _error(400, "INVALID_INPUT", str(exc))

    @app.exception_handler(PostNotFoundError)
    async def not_found_handler(request: Request, exc: PostNotFoundError) -> JSONResponse:
        return _error(
            404,
            "POST_NOT_FOUND",
            "The requested resource could not be found",
            {"post_id": exc.post_id},
        )

    @app.exception_handler(StorageUnavailableError)
    async def storage_error_handler(request: Request, exc: StorageUnavailableError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
        return _error(
            500,
            "STORAGE_UNAVAILABLE",
            "The server encountered a problem and could not process your request",
        )

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"{request.method} {request.url.path} failed")
        return _error(500, "INTERNAL_ERROR", str(exc) if settings.debug else "Internal server error")

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "blog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        timeout_keep_alive=60,
    )
