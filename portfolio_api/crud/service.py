from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.service import Service
from ..schemas.portfolio import ServiceCreate, ServiceUpdate
from .base import apply_updates, delete_by_id, save


def get_services(db: Session) -> List[Service]:
    return db.query(Service).order_by(Service.id).all()


def get_service(db: Session, service_id: int) -> Optional[Service]:
    return db.query(Service).filter(Service.id == service_id).first()


def create_service(db: Session, service: ServiceCreate) -> Service:
    return save(db, Service(**service.model_dump()))


def update_service(db: Session, service_id: int, service: ServiceUpdate) -> Optional[Service]:
    db_service = get_service(db, service_id)
    if not db_service:
        return None
    apply_updates(db_service, service.model_dump(exclude_unset=True))
    return save(db, db_service)


def delete_service(db: Session, service_id: int) -> bool:
    return delete_by_id(db, Service, service_id)
