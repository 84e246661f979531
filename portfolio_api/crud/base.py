from typing import Any, Dict

from sqlalchemy.orm import Session


def apply_updates(obj, updates: Dict[str, Any]):
    """Merge only the supplied fields; None never overwrites a NOT NULL column."""
    columns = obj.__table__.c
    for field, value in updates.items():
        if value is None and field in columns and not columns[field].nullable:
            continue
        setattr(obj, field, value)
    return obj


def save(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def delete_by_id(db: Session, model, obj_id: int) -> bool:
    # Hard delete; zero matched rows is still a success
    db.query(model).filter(model.id == obj_id).delete(synchronize_session=False)
    db.commit()
    return True
