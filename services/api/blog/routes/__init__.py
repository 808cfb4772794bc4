"""API routes."""

from fastapi import APIRouter

from blog.routes import health, posts

api_router = APIRouter()

# Health check
api_router.include_router(health.router, prefix="/v1", tags=["health"])

# Posts (create, read, update, tag filter, full-text search)
api_router.include_router(posts.router, prefix="/v1/posts", tags=["posts"])
