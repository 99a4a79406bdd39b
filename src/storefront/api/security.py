"""Bearer-token authentication and role checks for the HTTP API."""

from datetime import UTC, datetime, timedelta

import jwt
import structlog
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from protean.utils.globals import current_domain

from storefront import config
from storefront.identity.user import Role, User

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


def issue_token(user, expires_minutes=None):
    """Signed JWT carrying the user's id, email and roles."""
    expires_at = datetime.now(UTC) + timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "roles": list(user.roles or []),
        "exp": expires_at,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token):
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_user(credentials: HTTPAuthorizationCredentials | None = Depends(security)) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = current_domain.repository_for(User).get_or_none(user_id)
    if user is None:
        logger.info("token_for_unknown_user", user_id=user_id)
        raise HTTPException(status_code=401, detail="User not found")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.has_role(Role.ADMIN.value):
        raise HTTPException(status_code=403, detail="Admin only")
    return user
