import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, ValidationError

from ..config import DEFAULT_JWT_SECRET, get_config

logger = logging.getLogger(__name__)

_config = get_config()
SECRET_KEY = _config.JWT_SECRET
ALGORITHM = _config.JWT_ALGORITHM
ACCESS_TOKEN_EXPIRE_DAYS = _config.JWT_EXPIRES_DAYS

if SECRET_KEY == DEFAULT_JWT_SECRET:
    logger.warning("JWT_SECRET is not set; using the development secret")

# Configuration du hachage de mot de passe
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenClaims(BaseModel):
    """Decoded token payload."""

    model_config = ConfigDict(frozen=True)

    userId: int
    username: str
    role: str
    iat: int
    exp: int

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Malformed or unknown hash
        return False


def create_access_token(
    user,
    expires_delta: Optional[timedelta] = None,
    secret_key: Optional[str] = None,
) -> str:
    """Sign a token asserting the user's id, username and role."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode = {
        "userId": user.id,
        "username": user.username,
        "role": user.role,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(to_encode, secret_key or SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str, secret_key: Optional[str] = None) -> Optional[TokenClaims]:
    """Return the token's claims, or None if it is malformed, expired or mis-signed."""
    try:
        payload = jwt.decode(token, secret_key or SECRET_KEY, algorithms=[ALGORITHM])
        return TokenClaims(**payload)
    except (JWTError, ValidationError, TypeError) as exc:
        logger.debug("Token verification failed for %s...: %s", token[:10], exc)
        return None
