# models/user.py
from enum import Enum

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from ..database.database import Base


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id            = Column(Integer, primary_key=True)
    username      = Column(String(150), nullable=False, unique=True, index=True)
    password_hash = Column(String(256), nullable=False)
    name          = Column(String(150))
    email         = Column(String(256))
    role          = Column(String(20), nullable=False, default=UserRole.USER.value)

    projects = relationship("Project", back_populates="owner")
    services = relationship("Service", back_populates="owner")
    messages = relationship("ContactMessage", back_populates="user")
    blog_posts = relationship("BlogPost", back_populates="author")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
