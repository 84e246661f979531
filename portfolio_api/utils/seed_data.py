# Default portfolio content loaded by `python migrate.py --seed`
from sqlalchemy.orm import Session

from ..crud import project as crud_project
from ..crud import service as crud_service
from ..crud import skill as crud_skill
from ..schemas.portfolio import ProjectCreate, ServiceCreate, SkillCreate, SkillGroupCreate

PROJECTS = [
    {
        "title": "E-commerce Dashboard",
        "description": "A comprehensive dashboard for online store management with real-time analytics, inventory tracking, and order processing.",
        "image": "https://images.unsplash.com/photo-1551288049-bebda4e38f71?auto=format&fit=crop&w=2070&q=80",
        "category": "Web Development",
        "tags": ["React", "Node.js", "MongoDB"],
        "featured": True,
    },
    {
        "title": "Fitness Tracker App",
        "description": "Mobile application for tracking workouts, nutrition, and health metrics with personalized recommendations.",
        "image": "https://images.unsplash.com/photo-1555774698-0b77e0d5fac6?auto=format&fit=crop&w=2070&q=80",
        "category": "Mobile Apps",
        "tags": ["React Native", "Firebase", "GraphQL"],
    },
    {
        "title": "AI Content Generator",
        "description": "Platform that uses machine learning to generate blog posts, social media content, and marketing copy.",
        "image": "https://images.unsplash.com/photo-1548094878-84ced0f6896d?auto=format&fit=crop&w=2070&q=80",
        "category": "AI/ML",
        "tags": ["Python", "TensorFlow", "FastAPI"],
        "featured": True,
    },
    {
        "title": "Team Collaboration Tool",
        "description": "Real-time collaboration platform for remote teams with project management, chat, and file sharing capabilities.",
        "image": "https://images.unsplash.com/photo-1551434678-e076c223a692?auto=format&fit=crop&w=2070&q=80",
        "category": "Web Development",
        "tags": ["React", "Express", "Socket.io"],
    },
]

SERVICES = [
    {
        "title": "Custom Web Application Development",
        "description": "End-to-end development of scalable, custom web applications tailored to your business needs.",
        "icon": "ri-code-box-line",
        "icon_bg_color": "bg-blue-100",
        "features": [
            "Requirements analysis and planning",
            "Full-stack development (React, Angular, Vue)",
            "Database design and optimization",
            "Responsive and accessible interfaces",
        ],
        "engagement_model": "Project-based or retainer",
        "popular": True,
    },
    {
        "title": "Technical Product Consulting",
        "description": "Strategic technical guidance to optimize your product development process and technology stack.",
        "icon": "ri-lightbulb-flash-line",
        "icon_bg_color": "bg-yellow-100",
        "features": [
            "Technology stack evaluation",
            "Architecture reviews and recommendations",
            "Performance optimization",
        ],
        "engagement_model": "Weekly or monthly retainer",
    },
    {
        "title": "System Architecture and DevOps",
        "description": "Designing robust system architectures and implementing modern DevOps practices.",
        "icon": "ri-cloud-line",
        "icon_bg_color": "bg-purple-100",
        "features": [
            "Cloud architecture design (AWS, Azure, GCP)",
            "CI/CD pipeline implementation",
            "Container orchestration (Docker, Kubernetes)",
        ],
        "engagement_model": "Project-based",
    },
]

SKILL_GROUPS = [
    {
        "title": "Languages",
        "icon": "ri-code-s-slash-line",
        "icon_bg_color": "bg-blue-100",
        "skills": [("JavaScript", "bg-blue-500"), ("TypeScript", "bg-blue-600"), ("Python", "bg-green-500"), ("Go", "bg-cyan-500")],
    },
    {
        "title": "Frameworks",
        "icon": "ri-stack-line",
        "icon_bg_color": "bg-green-100",
        "skills": [("React", "bg-blue-400"), ("Next.js", "bg-purple-400"), ("Express", "bg-yellow-400"), ("Django", "bg-indigo-400")],
    },
    {
        "title": "Tools",
        "icon": "ri-tools-fill",
        "icon_bg_color": "bg-purple-100",
        "skills": [("Git", "bg-gray-600"), ("Docker", "bg-orange-500"), ("Figma", "bg-purple-500")],
    },
    {
        "title": "Platforms",
        "icon": "ri-cloud-line",
        "icon_bg_color": "bg-yellow-100",
        "skills": [("AWS", "bg-orange-400"), ("Google Cloud", "bg-red-400"), ("Vercel", "bg-black")],
    },
]


def seed_portfolio(db: Session) -> dict:
    """Insert the default content into empty tables. Returns how many rows were added per table."""
    added = {"projects": 0, "services": 0, "skill_groups": 0, "skills": 0}

    if not crud_project.get_projects(db):
        for item in PROJECTS:
            crud_project.create_project(db, ProjectCreate(**item))
            added["projects"] += 1

    if not crud_service.get_services(db):
        for item in SERVICES:
            crud_service.create_service(db, ServiceCreate(**item))
            added["services"] += 1

    if not crud_skill.get_skill_groups(db):
        for item in SKILL_GROUPS:
            group_fields = {k: v for k, v in item.items() if k != "skills"}
            group = crud_skill.create_skill_group(db, SkillGroupCreate(**group_fields))
            added["skill_groups"] += 1
            for name, color in item["skills"]:
                crud_skill.create_skill(db, SkillCreate(name=name, color=color, group_id=group.id))
                added["skills"] += 1

    return added
