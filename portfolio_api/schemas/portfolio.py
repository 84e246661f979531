from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import APIResponse, CamelModel


# ---------- projects ----------
class ProjectBase(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    image: str = Field(min_length=1, max_length=500)
    category: str = Field(min_length=1, max_length=100)
    tags: List[str] = []
    github_link: Optional[str] = None
    demo_link: Optional[str] = None
    user_id: Optional[int] = None
    featured: bool = False


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    tags: Optional[List[str]] = None
    github_link: Optional[str] = None
    demo_link: Optional[str] = None
    user_id: Optional[int] = None
    featured: Optional[bool] = None


class ProjectOut(ProjectBase):
    id: int
    created_at: Optional[datetime] = None


class ProjectResponse(APIResponse):
    project: ProjectOut


class ProjectListResponse(APIResponse):
    projects: List[ProjectOut]


# ---------- services ----------
class ServiceBase(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    icon: str = Field(min_length=1, max_length=100)
    icon_bg_color: str = Field(min_length=1, max_length=100)
    features: List[str] = []
    price: Optional[str] = None
    engagement_model: Optional[str] = None
    popular: bool = False
    user_id: Optional[int] = None


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    icon: Optional[str] = Field(None, min_length=1, max_length=100)
    icon_bg_color: Optional[str] = Field(None, min_length=1, max_length=100)
    features: Optional[List[str]] = None
    price: Optional[str] = None
    engagement_model: Optional[str] = None
    popular: Optional[bool] = None
    user_id: Optional[int] = None


class ServiceOut(ServiceBase):
    id: int
    created_at: Optional[datetime] = None


class ServiceResponse(APIResponse):
    service: ServiceOut


class ServiceListResponse(APIResponse):
    services: List[ServiceOut]


# ---------- skills ----------
class SkillBase(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(min_length=1, max_length=100)


class SkillCreate(SkillBase):
    group_id: int


class SkillUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, min_length=1, max_length=100)
    group_id: Optional[int] = None


class SkillOut(SkillBase):
    id: int
    group_id: int


class SkillGroupBase(CamelModel):
    title: str = Field(min_length=1, max_length=100)
    icon: str = Field(min_length=1, max_length=100)
    icon_bg_color: str = Field(min_length=1, max_length=100)


class SkillGroupCreate(SkillGroupBase):
    pass


class SkillGroupUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = Field(None, min_length=1, max_length=100)
    icon_bg_color: Optional[str] = Field(None, min_length=1, max_length=100)


class SkillGroupOut(SkillGroupBase):
    id: int
    skills: List[SkillOut] = []


class SkillResponse(APIResponse):
    skill: SkillOut


class SkillGroupResponse(APIResponse):
    skill_group: SkillGroupOut


class SkillGroupListResponse(APIResponse):
    skill_groups: List[SkillGroupOut]
