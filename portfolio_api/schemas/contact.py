from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, constr

from .base import APIResponse, CamelModel


class ContactCreate(CamelModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=150)
    email: EmailStr
    subject: Optional[constr(strip_whitespace=True, max_length=300)] = None
    message: constr(strip_whitespace=True, min_length=1)


class ContactMessageOut(CamelModel):
    id: int
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    user_id: Optional[int] = None
    read: bool
    created_at: Optional[datetime] = None


class ContactMessageResponse(APIResponse):
    contact_message: ContactMessageOut


class ContactMessageListResponse(APIResponse):
    messages: List[ContactMessageOut]
    unread: int = 0
