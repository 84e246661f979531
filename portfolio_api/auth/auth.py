import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from ..utils.errors import AuthError, ForbiddenError
from ..utils.security import TokenClaims, verify_token

logger = logging.getLogger(__name__)

# auto_error=False: a missing header becomes our 401 envelope, not FastAPI's default
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_claims(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
) -> TokenClaims:
    """Any valid bearer token."""
    if not token:
        raise AuthError("Unauthorized: No token provided")

    claims = verify_token(token)
    if claims is None:
        raise AuthError("Unauthorized: Invalid token")

    request.state.user = claims
    return claims


def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    """Valid token with role admin: 401 without a usable token, 403 for other roles."""
    if not claims.is_admin:
        logger.info("User %s (role %s) denied admin access", claims.username, claims.role)
        raise ForbiddenError()
    return claims
