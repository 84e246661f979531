import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.auth import get_current_claims
from ..config import Config, get_app_config
from ..crud import user as crud_user
from ..database.database import get_db
from ..models.user import UserRole
from ..schemas.auth import AuthResponse, LoginRequest, RegisterAdminRequest, UserResponse
from ..utils.errors import AuthError, ConflictError, ForbiddenError, NotFoundError
from ..utils.security import TokenClaims, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Login for the admin CMS."""
    # Password first, so a wrong password never reveals the account's role
    user = crud_user.verify_user_credentials(db, payload.username, payload.password)
    if not user:
        logger.info("Failed login for %s", payload.username)
        raise AuthError("Invalid credentials")

    if not user.is_admin:
        raise ForbiddenError("Access denied: Admin privileges required")

    logger.info("Admin %s logged in", user.username)
    return {"token": create_access_token(user), "user": user}


@router.post("/register-admin", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_admin(
    payload: RegisterAdminRequest,
    db: Session = Depends(get_db),
    config: Config = Depends(get_app_config),
):
    """Create an admin account. Meant for initial setup."""
    if not config.ALLOW_ADMIN_REGISTRATION:
        raise ForbiddenError("Admin registration is disabled")

    if crud_user.get_user_by_username(db, payload.username):
        raise ConflictError("Username already exists")

    user = crud_user.create_user(
        db,
        username=payload.username,
        password=payload.password,
        name=payload.name,
        email=payload.email,
        role=UserRole.ADMIN.value,
    )
    logger.info("Admin account %s created", user.username)
    return {
        "token": create_access_token(user),
        "user": user,
        "message": "Admin account created",
    }


@router.get("/me", response_model=UserResponse)
def me(claims: TokenClaims = Depends(get_current_claims), db: Session = Depends(get_db)):
    user = crud_user.get_user(db, claims.userId)
    if not user:
        raise NotFoundError("User not found")
    return {"user": user}
