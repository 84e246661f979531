from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from ..models.skill import Skill, SkillGroup
from ..schemas.portfolio import SkillCreate, SkillGroupCreate, SkillGroupUpdate, SkillUpdate
from .base import apply_updates, delete_by_id, save


# ---------- skill groups ----------
def get_skill_groups(db: Session) -> List[SkillGroup]:
    return db.query(SkillGroup)\
             .options(selectinload(SkillGroup.skills))\
             .order_by(SkillGroup.id)\
             .all()


def get_skill_group(db: Session, group_id: int) -> Optional[SkillGroup]:
    return db.query(SkillGroup).filter(SkillGroup.id == group_id).first()


def create_skill_group(db: Session, group: SkillGroupCreate) -> SkillGroup:
    return save(db, SkillGroup(**group.model_dump()))


def update_skill_group(db: Session, group_id: int, group: SkillGroupUpdate) -> Optional[SkillGroup]:
    db_group = get_skill_group(db, group_id)
    if not db_group:
        return None
    apply_updates(db_group, group.model_dump(exclude_unset=True))
    return save(db, db_group)


def delete_skill_group(db: Session, group_id: int) -> bool:
    # Skills cannot outlive their group
    db.query(Skill).filter(Skill.group_id == group_id).delete(synchronize_session=False)
    return delete_by_id(db, SkillGroup, group_id)


# ---------- skills ----------
def get_skills(db: Session, group_id: Optional[int] = None) -> List[Skill]:
    query = db.query(Skill)
    if group_id is not None:
        query = query.filter(Skill.group_id == group_id)
    return query.order_by(Skill.id).all()


def get_skill(db: Session, skill_id: int) -> Optional[Skill]:
    return db.query(Skill).filter(Skill.id == skill_id).first()


def create_skill(db: Session, skill: SkillCreate) -> Skill:
    """Callers check that skill.group_id names an existing group."""
    return save(db, Skill(**skill.model_dump()))


def update_skill(db: Session, skill_id: int, skill: SkillUpdate) -> Optional[Skill]:
    db_skill = get_skill(db, skill_id)
    if not db_skill:
        return None
    apply_updates(db_skill, skill.model_dump(exclude_unset=True))
    return save(db, db_skill)


def delete_skill(db: Session, skill_id: int) -> bool:
    return delete_by_id(db, Skill, skill_id)
