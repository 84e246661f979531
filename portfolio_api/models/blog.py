from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database.database import Base
from .types import SafeJSON, utcnow


class BlogPost(Base):
    """Blog post metadata. The markdown body lives in object storage under s3_key."""

    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    title = Column(String(300), nullable=False)
    excerpt = Column(Text, nullable=False)
    cover_image = Column(String(1000))
    s3_key = Column(String(500), nullable=False)
    published_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    published = Column(Boolean, nullable=False, default=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    tags = Column(SafeJSON, nullable=False, default=list)
    read_time = Column(Integer, nullable=False, default=5)

    author = relationship("User", back_populates="blog_posts")
