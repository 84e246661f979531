from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..database.database import Base


class SkillGroup(Base):
    __tablename__ = "skill_groups"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    icon = Column(String(100), nullable=False)
    icon_bg_color = Column(String(100), nullable=False)

    skills = relationship(
        "Skill",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="Skill.id",
    )


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    color = Column(String(100), nullable=False)
    group_id = Column(Integer, ForeignKey("skill_groups.id"), nullable=False)

    group = relationship("SkillGroup", back_populates="skills")
