"""
Auth service: higher-level auth operations that combine multiple lower-level services.
Routers handle HTTP; the account logic lives here.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from jwt.exceptions import InvalidTokenError
from sqlalchemy.orm import Session

from app.models.user import User, AgentProfile, BuilderProfile
from app.core.security import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
)
from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    CredentialsException,
    InactiveUserException,
    InvalidOTPException,
    NotFoundException,
)
from app.services.otp_service import verify_otp_record

logger = logging.getLogger(__name__)


def issue_tokens(user: User) -> tuple[str, str]:
    return (
        create_access_token(str(user.id), user.user_type),
        create_refresh_token(str(user.id)),
    )


def register_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    phone: Optional[str] = None,
    user_type: str = "INDIVIDUAL",
    company_name: Optional[str] = None,
) -> User:
    """
    Creates a new account in one commit. AGENT and BUILDER accounts get their
    public profile row at the same time.
    Does NOT mark the user as verified; that happens after OTP verification.
    """
    email = email.lower()
    if db.query(User).filter(User.email == email).first():
        raise ConflictException("An account with this email already exists")

    new_user = User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        phone=phone,
        user_type=user_type,
        is_verified=False,
    )
    db.add(new_user)
    db.flush()  # flush to get the UUID assigned without committing

    if user_type == "AGENT":
        db.add(AgentProfile(user_id=new_user.id))
    elif user_type == "BUILDER":
        db.add(BuilderProfile(user_id=new_user.id, company_name=company_name or name))

    db.commit()
    db.refresh(new_user)
    logger.info("User registered", extra={"user_id": str(new_user.id), "user_type": user_type})
    return new_user


def verify_email(db: Session, email: str, otp: str) -> User:
    email = email.lower()
    if not verify_otp_record(db, email, otp, "verify_email"):
        raise InvalidOTPException()

    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFoundException("User")

    user.is_verified = True
    db.commit()
    db.refresh(user)
    return user


def authenticate(db: Session, email: str, password: str) -> tuple[User, str, str]:
    """
    Validates credentials and returns (user, access_token, refresh_token).

    Security: always use the same error message regardless of whether
    the email exists or the password is wrong (prevents user enumeration).
    """
    user = db.query(User).filter(User.email == email.lower()).first()
    # Always run verify_password so "wrong email" and "wrong password" take
    # the same time.
    password_ok = verify_password(password, user.hashed_password if user else DUMMY_PASSWORD_HASH)

    if not user or not password_ok:
        logger.warning("Failed login attempt", extra={"event": "auth", "email": email})
        raise CredentialsException("Invalid email or password")
    if not user.is_active:
        raise InactiveUserException()

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    access_token, refresh_token = issue_tokens(user)
    logger.info("User logged in", extra={"event": "auth", "user_id": str(user.id)})
    return user, access_token, refresh_token


def refresh_tokens(db: Session, refresh_token: str) -> tuple[str, str]:
    """Rotates both tokens. The role is re-read from the DB, not the old token."""
    try:
        payload = decode_refresh_token(refresh_token)
        user_id = uuid.UUID(str(payload.get("sub")))
    except (InvalidTokenError, ValueError):
        raise CredentialsException("Invalid refresh token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise CredentialsException("Invalid refresh token")
    if not user.is_active:
        raise InactiveUserException()

    return issue_tokens(user)


def reset_password(db: Session, email: str, otp: str, new_password: str) -> None:
    """Verifies OTP then updates the user's password."""
    email = email.lower()
    if not verify_otp_record(db, email, otp, "forgot_password"):
        raise InvalidOTPException()

    user = db.query(User).filter(User.email == email).first()
    if not user:
        # Silent success: don't reveal that the email doesn't exist
        return

    user.hashed_password = hash_password(new_password)
    db.commit()
    logger.info("Password reset", extra={"event": "auth", "user_id": str(user.id)})


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise BadRequestException("Current password is incorrect")
    user.hashed_password = hash_password(new_password)
    db.commit()
    logger.info("Password changed", extra={"event": "auth", "user_id": str(user.id)})
