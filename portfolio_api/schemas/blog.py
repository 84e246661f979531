import json
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import APIResponse, CamelModel

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
# Path segments under /api/blog that would shadow a post
RESERVED_SLUGS = {"tags", "content"}


def _check_slug(value):
    if value in RESERVED_SLUGS:
        raise ValueError(f"'{value}' is reserved and cannot be used as a slug")
    return value


def _parse_tags(value):
    # Multipart forms send tags as a JSON array string
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return []
        try:
            parsed = json.loads(value)
        except ValueError:
            parsed = [part.strip() for part in value.split(",") if part.strip()]
        if isinstance(parsed, str):
            parsed = [parsed]
        return parsed
    return value


class BlogPostCreate(CamelModel):
    title: str = Field(min_length=1, max_length=300)
    excerpt: str = Field(min_length=1)
    content: str = Field(min_length=1)
    slug: str = Field(min_length=1, max_length=200, pattern=SLUG_PATTERN)
    tags: List[str] = []
    published: bool = False
    read_time: int = Field(5, ge=1, le=600)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value):
        return _parse_tags(value)

    @field_validator("slug")
    @classmethod
    def check_slug(cls, value):
        return _check_slug(value)


class BlogPostUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    excerpt: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    tags: Optional[List[str]] = None
    published: Optional[bool] = None
    read_time: Optional[int] = Field(None, ge=1, le=600)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value):
        return _parse_tags(value)

    @field_validator("slug")
    @classmethod
    def check_slug(cls, value):
        return _check_slug(value)


class BlogPostOut(CamelModel):
    id: int
    slug: str
    title: str
    excerpt: str
    cover_image: Optional[str] = None
    s3_key: str
    published_at: datetime
    updated_at: datetime
    published: bool
    author_id: int
    tags: List[str] = []
    read_time: int


class BlogPostWithContent(BlogPostOut):
    content: Optional[str] = None


class BlogPostResponse(APIResponse):
    post: BlogPostWithContent


class BlogPostListResponse(APIResponse):
    posts: List[BlogPostOut]
    total: int
    page: int
    limit: int
    total_pages: int


class TagListResponse(APIResponse):
    tags: List[str]


class ContentResponse(APIResponse):
    content: str


class ImageUploadResponse(APIResponse):
    url: str
    key: str
