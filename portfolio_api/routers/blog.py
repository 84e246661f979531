"""
Blog routes.

Post bodies live in object storage, metadata in the database, with no
transaction spanning the two:

* create uploads the body first, so a storage failure leaves no row; a failed
  database write after a successful upload leaves an orphaned object;
* delete removes the row first and then cleans up storage best-effort, so a
  storage failure never leaves a row pointing at a dead key.
"""
import logging
import math
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..auth.auth import require_admin
from ..config import Config, get_app_config
from ..crud import blog as crud_blog
from ..crud.blog import DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE, PostQuery
from ..database.database import get_db
from ..schemas.base import APIResponse
from ..schemas.blog import (
    BlogPostCreate,
    BlogPostListResponse,
    BlogPostResponse,
    BlogPostUpdate,
    BlogPostWithContent,
    ContentResponse,
    ImageUploadResponse,
    TagListResponse,
)
from ..utils.errors import ConflictError, NotFoundError, StorageError, ValidationFailed
from ..utils.security import TokenClaims
from ..utils.storage import IMAGE_PREFIX, ObjectStorage, get_storage, normalize_text_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blog", tags=["blog"])
uploads_router = APIRouter(prefix="/api/uploads", tags=["blog"])
cms_router = APIRouter(prefix="/api/cms", tags=["cms"], dependencies=[Depends(require_admin)])


# ---------- helpers ----------------------------------------------------------
def _page(posts, total: int, options: PostQuery):
    return {
        "posts": posts,
        "total": total,
        "page": options.page,
        "limit": options.limit,
        "total_pages": math.ceil(total / options.limit) if total else 0,
    }


def _with_content(post, content: Optional[str]) -> BlogPostWithContent:
    return BlogPostWithContent.model_validate(post).model_copy(update={"content": content})


def _read_image(upload: Optional[UploadFile], field: str, max_size: int):
    """Return (bytes, content_type) for a submitted image, None when no file was sent."""
    if upload is None or not upload.filename:
        return None

    content_type = (upload.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise ValidationFailed.for_field(field, "Only image uploads are allowed")

    data = upload.file.read(max_size + 1)
    if len(data) > max_size:
        raise ValidationFailed.for_field(
            field, f"Image is too large ({max_size // (1024 * 1024)} MB max)"
        )
    if not data:
        raise ValidationFailed.for_field(field, "Image file is empty")
    return data, content_type


def _image_key(slug: str, content_type: str) -> str:
    extension = content_type.split("/")[-1].split("+")[0] or "jpg"
    return f"{IMAGE_PREFIX}{slug}-{uuid.uuid4()}.{extension}"


def _form_fields(**fields):
    # Multipart fields that were not sent stay unset
    return {name: value for name, value in fields.items() if value is not None}


def _delete_quietly(delete, key: Optional[str], what: str):
    if not key:
        return
    try:
        delete(key)
    except StorageError as exc:
        logger.error("Could not delete %s %s from storage: %s", what, key, exc.message)


# ==============================================
# Public routes
# ==============================================

@router.get("", response_model=BlogPostListResponse)
def list_published_posts(
    tag: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """Published posts only; drafts are listed by /api/cms/blog."""
    options = PostQuery(published=True, tag=tag, search=search, page=page, limit=limit)
    posts, total = crud_blog.list_posts(db, options)
    return _page(posts, total, options)


@router.get("/tags", response_model=TagListResponse)
def list_tags(db: Session = Depends(get_db)):
    return {"tags": crud_blog.get_blog_tags(db)}


@router.get("/content/{key:path}", response_model=ContentResponse)
def get_post_content(
    key: str,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    """Markdown body of a published post, looked up by its storage key."""
    post = crud_blog.get_blog_post_by_key(db, normalize_text_key(key))
    if not post or not post.published:
        raise NotFoundError("Blog post not found")
    return {"content": storage.get_text(post.s3_key)}


@router.get("/{slug}", response_model=BlogPostResponse)
def get_published_post(
    slug: str,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    post = crud_blog.get_blog_post_by_slug(db, slug)
    if not post or not post.published:
        raise NotFoundError("Blog post not found")
    return {"post": _with_content(post, storage.get_text(post.s3_key))}


@uploads_router.get("/{key:path}")
def serve_upload(key: str, storage: ObjectStorage = Depends(get_storage)):
    """Serve images held by the local fallback backend; never proxies the bucket."""
    key = key.lstrip("/")
    if not key.startswith(IMAGE_PREFIX):
        raise NotFoundError("File not found")
    data, content_type = storage.local_backend.get_binary(key)
    return Response(content=data, media_type=content_type)


# ==============================================
# CMS routes (admin)
# ==============================================

@cms_router.get("/blog", response_model=BlogPostListResponse)
def list_all_posts(
    published: Optional[bool] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """All posts, drafts included."""
    options = PostQuery(published=published, tag=tag, search=search, page=page, limit=limit)
    posts, total = crud_blog.list_posts(db, options)
    return _page(posts, total, options)


@cms_router.get("/blog/tags", response_model=TagListResponse)
def list_tags_admin(db: Session = Depends(get_db)):
    return {"tags": crud_blog.get_blog_tags(db)}


@cms_router.get("/blog/{post_id}", response_model=BlogPostResponse)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    post = crud_blog.get_blog_post(db, post_id)
    if not post:
        raise NotFoundError("Blog post not found")

    try:
        content = storage.get_text(post.s3_key)
    except StorageError as exc:
        logger.warning("Content for post %s unavailable: %s", post_id, exc.message)
        content = None
    return {"post": _with_content(post, content)}


@cms_router.post("/blog", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    title: Optional[str] = Form(None),
    excerpt: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    slug: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    published: Optional[str] = Form(None),
    read_time: Optional[str] = Form(None, alias="readTime"),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    claims: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    config: Config = Depends(get_app_config),
):
    try:
        post_in = BlogPostCreate(**_form_fields(
            title=title, excerpt=excerpt, content=content, slug=slug,
            tags=tags, published=published, read_time=read_time,
        ))
    except ValidationError as exc:
        raise ValidationFailed.from_pydantic(exc.errors())

    image = _read_image(cover_image, "coverImage", config.MAX_IMAGE_SIZE)

    if crud_blog.slug_taken(db, post_in.slug):
        raise ConflictError(f"A post with slug '{post_in.slug}' already exists")

    s3_key = f"blog/{post_in.slug}-{uuid.uuid4()}.md"
    storage.upload_text(s3_key, post_in.content)

    cover_url = None
    if image:
        data, content_type = image
        cover_url = storage.upload_binary(_image_key(post_in.slug, content_type), data, content_type)

    post = crud_blog.create_blog_post(db, {
        **post_in.model_dump(exclude={"content"}),
        "cover_image": cover_url,
        "s3_key": s3_key,
        "author_id": claims.userId,
    })
    logger.info("Blog post %s (%s) created by %s", post.id, post.slug, claims.username)
    return {
        "post": _with_content(post, post_in.content),
        "message": "Blog post created successfully",
    }


@cms_router.put("/blog/{post_id}", response_model=BlogPostResponse)
def update_post(
    post_id: int,
    title: Optional[str] = Form(None),
    excerpt: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    slug: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    published: Optional[str] = Form(None),
    read_time: Optional[str] = Form(None, alias="readTime"),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    config: Config = Depends(get_app_config),
):
    existing = crud_blog.get_blog_post(db, post_id)
    if not existing:
        raise NotFoundError("Blog post not found")

    try:
        post_in = BlogPostUpdate(**_form_fields(
            title=title, excerpt=excerpt, content=content, slug=slug,
            tags=tags, published=published, read_time=read_time,
        ))
    except ValidationError as exc:
        raise ValidationFailed.from_pydantic(exc.errors())

    image = _read_image(cover_image, "coverImage", config.MAX_IMAGE_SIZE)

    if post_in.slug and crud_blog.slug_taken(db, post_in.slug, exclude_id=post_id):
        raise ConflictError(f"A post with slug '{post_in.slug}' already exists")

    # The body is rewritten in place under the same key
    if post_in.content is not None:
        storage.upload_text(existing.s3_key, post_in.content)

    fields = post_in.model_dump(exclude_unset=True, exclude={"content"})
    old_cover = existing.cover_image
    if image:
        data, content_type = image
        fields["cover_image"] = storage.upload_binary(
            _image_key(post_in.slug or existing.slug, content_type), data, content_type
        )

    post = crud_blog.update_blog_post(db, post_id, fields)
    if image and old_cover:
        _delete_quietly(storage.delete_object, storage.key_for_url(old_cover), "cover image")

    logger.info("Blog post %s updated", post_id)
    return {
        "post": _with_content(post, post_in.content),
        "message": "Blog post updated successfully",
    }


@cms_router.delete("/blog/{post_id}", response_model=APIResponse)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    post = crud_blog.get_blog_post(db, post_id)
    if not post:
        raise NotFoundError("Blog post not found")

    # Read before the row goes away
    s3_key, cover_image = post.s3_key, post.cover_image

    crud_blog.delete_blog_post(db, post_id)
    logger.info("Blog post %s deleted", post_id)

    _delete_quietly(storage.delete_text, s3_key, "post body")
    if cover_image:
        _delete_quietly(storage.delete_object, storage.key_for_url(cover_image), "cover image")

    return {"message": "Blog post deleted successfully"}


@cms_router.post("/upload/image", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_image(
    file: Optional[UploadFile] = File(None),
    storage: ObjectStorage = Depends(get_storage),
    config: Config = Depends(get_app_config),
):
    """Standalone image upload for the post editor."""
    image = _read_image(file, "file", config.MAX_IMAGE_SIZE)
    if image is None:
        raise ValidationFailed.for_field("file", "No file received")

    data, content_type = image
    key = _image_key("inline", content_type)
    url = storage.upload_binary(key, data, content_type)
    return {"url": url, "key": key}
