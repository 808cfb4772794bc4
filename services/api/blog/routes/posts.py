"""Post endpoints.

POST      /v1/posts                      - create (201)
GET       /v1/posts/search-by-tag?tag=X  - posts containing a tag
GET       /v1/posts/search?q=X           - ranked full-text search
GET       /v1/posts/{id}                 - cache-aside point read
PUT/PATCH /v1/posts/{id}                 - full replace, invalidates cache

Routers are thin: call PostService for everything else. Domain errors are
mapped to HTTP responses by the handlers registered in create_app().
"""

from fastapi import APIRouter, Depends, Path, Query, status

from blog.deps import get_post_service
from blog.schemas import ERROR_RESPONSES, ErrorResponse, PostEnvelope, PostListEnvelope, PostRequest
from blog.services.posts import PostService

router = APIRouter(responses=ERROR_RESPONSES)

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Post not found"}}


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostRequest,
    service: PostService = Depends(get_post_service),
) -> PostEnvelope:
    """Create a post; an activity log entry is written in the same transaction."""
    post = await service.create(body.title, body.content, body.tags)
    return PostEnvelope(post=post)


# Declared before /{post_id} so the literal paths win.
@router.get("/search-by-tag", response_model=PostListEnvelope)
async def search_by_tag(
    tag: str = Query(min_length=1, max_length=100, description="Tag to filter by"),
    service: PostService = Depends(get_post_service),
) -> PostListEnvelope:
    """Posts whose tags contain `tag` (possibly none)."""
    posts = await service.find_by_tag(tag)
    return PostListEnvelope(posts=posts)


@router.get("/search", response_model=PostListEnvelope)
async def search_posts(
    q: str = Query(min_length=1, max_length=200, description="Full-text query"),
    service: PostService = Depends(get_post_service),
) -> PostListEnvelope:
    """Full-text search over title and content, most relevant first."""
    posts = await service.search(q)
    return PostListEnvelope(posts=posts)


@router.get("/{post_id}", response_model=PostEnvelope, responses=NOT_FOUND)
async def get_post(
    post_id: int = Path(ge=1, description="Post ID"),
    service: PostService = Depends(get_post_service),
) -> PostEnvelope:
    post = await service.get_and_cache(post_id)
    return PostEnvelope(post=post)


@router.api_route("/{post_id}", methods=["PUT", "PATCH"], response_model=PostEnvelope, responses=NOT_FOUND)
async def update_post(
    body: PostRequest,
    post_id: int = Path(ge=1, description="Post ID"),
    service: PostService = Depends(get_post_service),
) -> PostEnvelope:
    """Replace title, content and tags. PATCH is accepted but is not partial."""
    post = await service.update(post_id, body.title, body.content, body.tags)
    return PostEnvelope(post=post)
