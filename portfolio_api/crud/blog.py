from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Session

from ..models.blog import BlogPost
from ..models.types import utcnow
from .base import apply_updates, delete_by_id, save

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
MAX_PAGE = 10_000


@dataclass(frozen=True)
class PostQuery:
    published: Optional[bool] = None
    tag: Optional[str] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _has_tag(db: Session, tag: str):
    """Containment check on the JSON tag list (exact, case-sensitive)."""
    if db.get_bind().dialect.name == "postgresql":
        return type_coerce(BlogPost.tags, JSONB).contains([tag])
    tags = func.json_each(BlogPost.tags).table_valued("value")
    return select(tags.c.value).where(tags.c.value == tag).exists()


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_posts(db: Session, options: PostQuery) -> Tuple[List[BlogPost], int]:
    """
    Filter (AND-combined), sort newest first and paginate.
    Returns the page of posts and the total count ignoring limit/offset.
    """
    query = db.query(BlogPost)
    if options.published is not None:
        query = query.filter(BlogPost.published == options.published)
    if options.tag:
        query = query.filter(_has_tag(db, options.tag))
    if options.search:
        pattern = f"%{_escape_like(options.search)}%"
        query = query.filter(or_(
            BlogPost.title.ilike(pattern, escape="\\"),
            BlogPost.excerpt.ilike(pattern, escape="\\"),
        ))

    total = query.count()
    posts = query.order_by(BlogPost.published_at.desc(), BlogPost.id.desc())\
                 .offset(options.offset)\
                 .limit(options.limit)\
                 .all()
    return posts, total


def get_blog_post(db: Session, post_id: int) -> Optional[BlogPost]:
    return db.query(BlogPost).filter(BlogPost.id == post_id).first()


def get_blog_post_by_slug(db: Session, slug: str) -> Optional[BlogPost]:
    return db.query(BlogPost).filter(BlogPost.slug == slug).first()


def get_blog_post_by_key(db: Session, s3_key: str) -> Optional[BlogPost]:
    return db.query(BlogPost).filter(BlogPost.s3_key == s3_key).first()


def slug_taken(db: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(BlogPost.id).filter(BlogPost.slug == slug)
    if exclude_id is not None:
        query = query.filter(BlogPost.id != exclude_id)
    return query.first() is not None


def get_blog_tags(db: Session) -> List[str]:
    tags = set()
    for (post_tags,) in db.query(BlogPost.tags).all():
        tags.update(post_tags or [])
    return sorted(tags)


def create_blog_post(db: Session, fields: Dict[str, Any]) -> BlogPost:
    """Persist metadata only; the body must already be in object storage."""
    post = BlogPost(**fields)
    now = utcnow()
    post.updated_at = now
    if post.published_at is None:
        post.published_at = now
    return save(db, post)


def update_blog_post(db: Session, post_id: int, fields: Dict[str, Any]) -> Optional[BlogPost]:
    post = get_blog_post(db, post_id)
    if not post:
        return None
    now = utcnow()
    # draft -> published stamps the publication time
    if fields.get("published") and not post.published and "published_at" not in fields:
        fields = dict(fields, published_at=now)
    apply_updates(post, fields)
    post.updated_at = now
    return save(db, post)


def delete_blog_post(db: Session, post_id: int) -> bool:
    return delete_by_id(db, BlogPost, post_id)
