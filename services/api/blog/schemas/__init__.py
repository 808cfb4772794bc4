"""Pydantic schemas for API request/response validation."""

from blog.schemas.common import ERROR_RESPONSES, ErrorDetail, ErrorResponse
from blog.schemas.posts import (
    HealthResponse,
    PostEnvelope,
    PostListEnvelope,
    PostRecord,
    PostRequest,
    SystemInfo,
)

__all__ = [
    "ERROR_RESPONSES",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "PostEnvelope",
    "PostListEnvelope",
    "PostRecord",
    "PostRequest",
    "SystemInfo",
]
