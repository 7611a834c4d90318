from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import func
import logging
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import UserLogin, Token, User as UserSchema
from app.core.security import verify_password, create_access_token
from app.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
def login(
    user_credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """Exchange email/password for a bearer token."""
    # Normalize email so casing and stray whitespace don't break login
    normalized_email = user_credentials.email.lower().strip()
    user = db.query(User).filter(func.lower(User.email) == normalized_email).first()

    if not user or not verify_password(user_credentials.password.strip(), user.hashed_password):
        logger.info("[AUTH] Failed login for %s", normalized_email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={
        "sub": user.email,
        "user_id": str(user.id),
        "role": user.role.value,
        "org_id": str(user.org_id) if user.org_id else None,
    })
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserSchema)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
