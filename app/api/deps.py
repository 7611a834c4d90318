from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging
import uuid
from app.db.session import get_db
from app.models.user import User, FEATURE_ADMIN_ROLES
from app.core.security import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token to a user row."""
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    email: Optional[str] = payload.get("sub")
    user_id_from_token: Optional[str] = payload.get("user_id")

    user = None
    if user_id_from_token:
        # Prefer the id from the token; fall back to email for older tokens
        try:
            user = db.query(User).filter(User.id == uuid.UUID(user_id_from_token)).first()
        except (ValueError, TypeError):
            logger.warning("[AUTH] Invalid user_id format in token: %s", user_id_from_token)
    if user is None and email:
        user = db.query(User).filter(User.email == email).first()

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Dependency to ensure the user may manage the feature catalog
    (projectra_admin or admin role).
    """
    if user.role in FEATURE_ADMIN_ROLES:
        return user
    logger.warning("[AUTH] User %s (%s) denied feature admin access", user.id, user.role.value)
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Admin access required"
    )
