"""Schemas for the posts endpoints (/v1/posts) and cached post snapshots."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

# Stored exactly as sent; blank tags are rejected rather than trimmed.
Tag = Annotated[str, StringConstraints(min_length=1, max_length=100)]


class PostRecord(BaseModel):
    """A post as returned by the store, cached in Redis and sent to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    created_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags_are_empty(cls, v: Any) -> list[str]:
        return [] if v is None else v


class PostRequest(BaseModel):
    """Request body for create and full-replace update."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=500)
    content: str = Field(min_length=1)
    tags: list[Tag] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _reject_blank_tags(cls, v: list[str]) -> list[str]:
        if any(not tag.strip() for tag in v):
            raise ValueError("tags must not be blank")
        return v


class PostEnvelope(BaseModel):
    post: PostRecord


class PostListEnvelope(BaseModel):
    posts: list[PostRecord]


class SystemInfo(BaseModel):
    environment: str
    version: str


class HealthResponse(BaseModel):
    """Response payload for GET /v1/healthcheck."""

    status: str = "available"
    system_info: SystemInfo
