"""
Portfolio content: projects, services and skills.

Reads are public; writes live under /api/cms and require an admin token.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.auth import require_admin
from ..crud import project as crud_project
from ..crud import service as crud_service
from ..crud import skill as crud_skill
from ..database.database import get_db
from ..schemas.base import APIResponse
from ..schemas.portfolio import (
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
    ServiceCreate,
    ServiceListResponse,
    ServiceResponse,
    ServiceUpdate,
    SkillCreate,
    SkillGroupCreate,
    SkillGroupListResponse,
    SkillGroupResponse,
    SkillGroupUpdate,
    SkillResponse,
    SkillUpdate,
)
from ..utils.errors import NotFoundError, ValidationFailed

router = APIRouter(prefix="/api", tags=["portfolio"])
cms_router = APIRouter(prefix="/api/cms", tags=["cms"], dependencies=[Depends(require_admin)])


def _found(obj, what: str):
    if obj is None:
        raise NotFoundError(f"{what} not found")
    return obj


# ==============================================
# Public reads
# ==============================================

@router.get("/projects", response_model=ProjectListResponse)
def list_projects(
    featured: Optional[bool] = None,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return {"projects": crud_project.get_projects(db, featured=featured, category=category)}


@router.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project(project_id: int, db: Session = Depends(get_db)):
    return {"project": _found(crud_project.get_project(db, project_id), "Project")}


@router.get("/services", response_model=ServiceListResponse)
def list_services(db: Session = Depends(get_db)):
    return {"services": crud_service.get_services(db)}


@router.get("/services/{service_id}", response_model=ServiceResponse)
def get_service(service_id: int, db: Session = Depends(get_db)):
    return {"service": _found(crud_service.get_service(db, service_id), "Service")}


@router.get("/skills", response_model=SkillGroupListResponse)
def list_skills(db: Session = Depends(get_db)):
    """Skill groups with their skills nested."""
    return {"skill_groups": crud_skill.get_skill_groups(db)}


# ==============================================
# Admin writes
# ==============================================

@cms_router.post("/projects", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(payload: ProjectCreate, db: Session = Depends(get_db)):
    return {"project": crud_project.create_project(db, payload), "message": "Project created"}


@cms_router.put("/projects/{project_id}", response_model=ProjectResponse)
def update_project(project_id: int, payload: ProjectUpdate, db: Session = Depends(get_db)):
    project = _found(crud_project.update_project(db, project_id, payload), "Project")
    return {"project": project, "message": "Project updated"}


@cms_router.delete("/projects/{project_id}", response_model=APIResponse)
def delete_project(project_id: int, db: Session = Depends(get_db)):
    _found(crud_project.get_project(db, project_id), "Project")
    crud_project.delete_project(db, project_id)
    return {"message": "Project deleted"}


@cms_router.post("/services", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(payload: ServiceCreate, db: Session = Depends(get_db)):
    return {"service": crud_service.create_service(db, payload), "message": "Service created"}


@cms_router.put("/services/{service_id}", response_model=ServiceResponse)
def update_service(service_id: int, payload: ServiceUpdate, db: Session = Depends(get_db)):
    service = _found(crud_service.update_service(db, service_id, payload), "Service")
    return {"service": service, "message": "Service updated"}


@cms_router.delete("/services/{service_id}", response_model=APIResponse)
def delete_service(service_id: int, db: Session = Depends(get_db)):
    _found(crud_service.get_service(db, service_id), "Service")
    crud_service.delete_service(db, service_id)
    return {"message": "Service deleted"}


@cms_router.post("/skill-groups", response_model=SkillGroupResponse, status_code=status.HTTP_201_CREATED)
def create_skill_group(payload: SkillGroupCreate, db: Session = Depends(get_db)):
    return {"skill_group": crud_skill.create_skill_group(db, payload), "message": "Skill group created"}


@cms_router.put("/skill-groups/{group_id}", response_model=SkillGroupResponse)
def update_skill_group(group_id: int, payload: SkillGroupUpdate, db: Session = Depends(get_db)):
    group = _found(crud_skill.update_skill_group(db, group_id, payload), "Skill group")
    return {"skill_group": group, "message": "Skill group updated"}


@cms_router.delete("/skill-groups/{group_id}", response_model=APIResponse)
def delete_skill_group(group_id: int, db: Session = Depends(get_db)):
    _found(crud_skill.get_skill_group(db, group_id), "Skill group")
    crud_skill.delete_skill_group(db, group_id)
    return {"message": "Skill group deleted"}


def _check_group(db: Session, group_id: Optional[int]):
    if group_id is not None and crud_skill.get_skill_group(db, group_id) is None:
        raise ValidationFailed.for_field("groupId", f"Skill group {group_id} does not exist")


@cms_router.post("/skills", response_model=SkillResponse, status_code=status.HTTP_201_CREATED)
def create_skill(payload: SkillCreate, db: Session = Depends(get_db)):
    _check_group(db, payload.group_id)
    return {"skill": crud_skill.create_skill(db, payload), "message": "Skill created"}


@cms_router.put("/skills/{skill_id}", response_model=SkillResponse)
def update_skill(skill_id: int, payload: SkillUpdate, db: Session = Depends(get_db)):
    _found(crud_skill.get_skill(db, skill_id), "Skill")
    _check_group(db, payload.group_id)
    return {"skill": crud_skill.update_skill(db, skill_id, payload), "message": "Skill updated"}


@cms_router.delete("/skills/{skill_id}", response_model=APIResponse)
def delete_skill(skill_id: int, db: Session = Depends(get_db)):
    _found(crud_skill.get_skill(db, skill_id), "Skill")
    crud_skill.delete_skill(db, skill_id)
    return {"message": "Skill deleted"}
