"""FastAPI dependencies."""

from fastapi import Request

from blog.services.posts import PostService


def get_post_service(request: Request) -> PostService:
    """PostService built during application startup."""
    service = getattr(request.app.state, "post_service", None)
    if service is None:
        raise RuntimeError("PostService not initialized. Application startup did not complete.")
    return service
