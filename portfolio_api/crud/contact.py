from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.contact import ContactMessage
from ..schemas.contact import ContactCreate
from .base import delete_by_id, save


def get_contact_messages(db: Session) -> List[ContactMessage]:
    return db.query(ContactMessage)\
             .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())\
             .all()


def get_contact_message(db: Session, message_id: int) -> Optional[ContactMessage]:
    return db.query(ContactMessage).filter(ContactMessage.id == message_id).first()


def count_unread_messages(db: Session) -> int:
    return db.query(ContactMessage).filter(ContactMessage.read.is_(False)).count()


def create_contact_message(db: Session, message: ContactCreate, user_id: Optional[int] = None) -> ContactMessage:
    return save(db, ContactMessage(**message.model_dump(), user_id=user_id, read=False))


def mark_contact_message_read(db: Session, message_id: int) -> Optional[ContactMessage]:
    # read only ever goes from False to True
    message = get_contact_message(db, message_id)
    if not message:
        return None
    if not message.read:
        message.read = True
        save(db, message)
    return message


def delete_contact_message(db: Session, message_id: int) -> bool:
    return delete_by_id(db, ContactMessage, message_id)
