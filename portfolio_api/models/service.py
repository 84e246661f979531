from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database.database import Base
from .types import SafeJSON, utcnow


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(100), nullable=False)
    icon_bg_color = Column(String(100), nullable=False)
    features = Column(SafeJSON, nullable=False, default=list)
    price = Column(String(100))
    engagement_model = Column(String(200))
    popular = Column(Boolean, nullable=False, default=False)
    user_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), default=utcnow)

    owner = relationship("User", back_populates="services")
