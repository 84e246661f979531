from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.user import User, UserRole
from ..utils.security import hash_password, verify_password
from .base import apply_updates, delete_by_id, save


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id).all()


def create_user(
    db: Session,
    username: str,
    password: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    role: str = UserRole.USER.value,
) -> User:
    """Create a user, hashing the plaintext password."""
    user = User(
        username=username,
        password_hash=hash_password(password),
        name=name,
        email=email,
        role=role,
    )
    return save(db, user)


def update_user(db: Session, user_id: int, **fields) -> Optional[User]:
    user = get_user(db, user_id)
    if not user:
        return None
    if "password" in fields:
        fields["password_hash"] = hash_password(fields.pop("password"))
    apply_updates(user, fields)
    return save(db, user)


def delete_user(db: Session, user_id: int) -> bool:
    return delete_by_id(db, User, user_id)


def verify_user_credentials(db: Session, username: str, password: str) -> Optional[User]:
    """
    Return the user if the password matches, None otherwise.
    """
    user = get_user_by_username(db, username)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
