import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth.auth import require_admin
from ..crud import contact as crud_contact
from ..database.database import get_db
from ..schemas.base import APIResponse
from ..schemas.contact import ContactCreate, ContactMessageListResponse, ContactMessageResponse
from ..utils.errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["contact"])
cms_router = APIRouter(prefix="/api/cms/contact", tags=["cms"], dependencies=[Depends(require_admin)])


@router.post("/contact", response_model=ContactMessageResponse)
def submit_contact(payload: ContactCreate, db: Session = Depends(get_db)):
    """Public contact form. Anonymous submissions are the normal case."""
    message = crud_contact.create_contact_message(db, payload)
    logger.info("Contact form submission #%s from %s", message.id, payload.email)
    return {
        "contact_message": message,
        "message": "Message received! We will get back to you soon.",
    }


@cms_router.get("", response_model=ContactMessageListResponse)
def list_messages(db: Session = Depends(get_db)):
    return {
        "messages": crud_contact.get_contact_messages(db),
        "unread": crud_contact.count_unread_messages(db),
    }


@cms_router.patch("/{message_id}/read", response_model=ContactMessageResponse)
def mark_read(message_id: int, db: Session = Depends(get_db)):
    message = crud_contact.mark_contact_message_read(db, message_id)
    if not message:
        raise NotFoundError("Message not found")
    return {"contact_message": message, "message": "Message marked as read"}


@cms_router.delete("/{message_id}", response_model=APIResponse)
def delete_message(message_id: int, db: Session = Depends(get_db)):
    if not crud_contact.get_contact_message(db, message_id):
        raise NotFoundError("Message not found")
    crud_contact.delete_contact_message(db, message_id)
    return {"message": "Message deleted"}
