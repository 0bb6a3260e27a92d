"""
FastAPI dependencies used across routers.
Auth and DB dependencies only.
Business logic belongs in services/.
"""
import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jwt.exceptions import InvalidTokenError

from app.database import get_db
from app.core.security import decode_access_token
from app.core.exceptions import CredentialsException, InactiveUserException, ForbiddenException
from app.models.user import User

# tokenUrl must match the actual login endpoint path
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
# Same scheme but without the automatic 401, for endpoints open to visitors
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _user_from_token(token: str, db: Session) -> Optional[User]:
    """Returns the token's user, or None when the token or its subject is invalid."""
    try:
        payload = decode_access_token(token)
        user_id = uuid.UUID(str(payload.get("sub")))
    except (InvalidTokenError, ValueError):
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Validates the JWT access token and returns the authenticated User.

    Checks performed (in order):
    1. Token is a valid JWT signed with our secret key
    2. Token type is 'access' (not refresh)
    3. 'sub' claim is a UUID that maps to a real user
    4. User account is still active

    The is_active check happens on EVERY request, so a deactivated user's
    existing valid JWT is immediately rejected.
    """
    user = _user_from_token(token, db)
    if user is None:
        raise CredentialsException()

    if not user.is_active:
        raise InactiveUserException()

    return user


def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Authenticated user when a valid token is sent, otherwise None. Never raises."""
    if not token:
        return None
    user = _user_from_token(token, db)
    if user is None or not user.is_active:
        return None
    return user


def get_current_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Requires the authenticated user to be an admin.
    Returns the User object so admin routes can access it normally.
    """
    if not current_user.is_admin:
        raise ForbiddenException("Admin access required")
    return current_user
