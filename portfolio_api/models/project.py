from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database.database import Base
from .types import SafeJSON, utcnow


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String(500), nullable=False)
    category = Column(String(100), nullable=False)
    tags = Column(SafeJSON, nullable=False, default=list)
    github_link = Column(String(500))
    demo_link = Column(String(500))
    user_id = Column(Integer, ForeignKey("users.id"))
    featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    owner = relationship("User", back_populates="projects")
