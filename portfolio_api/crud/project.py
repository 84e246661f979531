from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.project import Project
from ..schemas.portfolio import ProjectCreate, ProjectUpdate
from .base import apply_updates, delete_by_id, save


def get_projects(db: Session, featured: Optional[bool] = None, category: Optional[str] = None) -> List[Project]:
    query = db.query(Project)
    if featured is not None:
        query = query.filter(Project.featured == featured)
    if category:
        query = query.filter(Project.category == category)
    return query.order_by(Project.featured.desc(), Project.id).all()


def get_project(db: Session, project_id: int) -> Optional[Project]:
    return db.query(Project).filter(Project.id == project_id).first()


def create_project(db: Session, project: ProjectCreate) -> Project:
    return save(db, Project(**project.model_dump()))


def update_project(db: Session, project_id: int, project: ProjectUpdate) -> Optional[Project]:
    db_project = get_project(db, project_id)
    if not db_project:
        return None
    apply_updates(db_project, project.model_dump(exclude_unset=True))
    return save(db, db_project)


def delete_project(db: Session, project_id: int) -> bool:
    return delete_by_id(db, Project, project_id)
