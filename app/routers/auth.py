"""
Auth router: registration, email verification, login, token refresh, password reset.

Registration:
  1. POST /auth/register     → create user (unverified) + welcome email + OTP
  2. POST /auth/verify-email → verify OTP → mark verified

Login (direct, no OTP):
  POST /auth/login → validate credentials → return tokens immediately

Password reset:
  1. POST /auth/forgot-password → send OTP (always 200, never reveals if email exists)
  2. POST /auth/reset-password  → verify OTP + set new password

Every endpoint that checks a secret shares the "auth" rate limit bucket.
"""
from fastapi import APIRouter, Depends, BackgroundTasks
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.rate_limiter import rate_limit
from app.schemas.auth import (
    RegisterRequest, RegisterResponse, VerifyEmailRequest, LoginRequest,
    ForgotPasswordRequest, ResetPasswordRequest, RefreshTokenRequest,
    TokenResponse, MessageResponse,
)
from app.schemas.user import LoginResponse, UserAuthResponse
from app.services import auth_service, otp_service
from app.services.email_service import send_otp_email, send_welcome_email
from app.models.user import User

router = APIRouter()


# ── Register ──────────────────────────────────────────────────────────────────

@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("auth"))],
)
async def register(
    body: RegisterRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Creates an unverified account (plus agent/builder profile) and emails a
    verification OTP. Uses BackgroundTasks so the HTTP response is returned
    immediately without waiting for SMTP to complete.
    """
    user = auth_service.register_user(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
        user_type=body.user_type,
        company_name=body.company_name,
    )

    raw_otp = otp_service.create_otp_record(
        db,
        email=user.email,
        purpose="verify_email",
        user_id=user.id,
    )

    background_tasks.add_task(send_welcome_email, user.email, user.name)
    background_tasks.add_task(send_otp_email, user.email, raw_otp, "verify_email")

    return {
        "message": "Account created. Please check your email for the OTP to verify your account.",
        "user_id": str(user.id),
    }


@router.post("/verify-email", response_model=MessageResponse, dependencies=[Depends(rate_limit("auth"))])
async def verify_email(body: VerifyEmailRequest, db: Session = Depends(get_db)):
    auth_service.verify_email(db, email=body.email, otp=body.otp)
    return {"message": "Email verified successfully."}


# ── Login ─────────────────────────────────────────────────────────────────────

@router.post("/login", response_model=LoginResponse, dependencies=[Depends(rate_limit("auth"))])
async def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Login with email and password. Returns tokens immediately."""
    user, access_token, refresh_token = auth_service.authenticate(
        db, email=body.email, password=body.password
    )
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "user": UserAuthResponse.model_validate(user),
    }


# ── Token Refresh ─────────────────────────────────────────────────────────────

@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(body: RefreshTokenRequest, db: Session = Depends(get_db)):
    """
    Exchange a valid refresh token for a new access token + refresh token.
    Stateless JWTs: the old refresh token is not revoked.
    """
    new_access, new_refresh = auth_service.refresh_tokens(db, body.refresh_token)
    return {
        "access_token": new_access,
        "refresh_token": new_refresh,
        "token_type": "bearer",
    }


# ── Forgot / Reset Password ───────────────────────────────────────────────────

@router.post("/forgot-password", response_model=MessageResponse, dependencies=[Depends(rate_limit("auth"))])
async def forgot_password(
    body: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Send password reset OTP.
    ALWAYS returns 200 OK, whether or not the email has an account.
    """
    email = body.email.lower()
    user = db.query(User).filter(User.email == email).first()
    if user:
        raw_otp = otp_service.create_otp_record(
            db,
            email=email,
            purpose="forgot_password",
            user_id=user.id,
        )
        background_tasks.add_task(send_otp_email, email, raw_otp, "forgot_password")

    return {"message": "If an account with that email exists, a reset OTP has been sent."}


@router.post("/reset-password", response_model=MessageResponse, dependencies=[Depends(rate_limit("auth"))])
async def reset_password(body: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Verify OTP and set a new password."""
    auth_service.reset_password(db, email=body.email, otp=body.otp, new_password=body.new_password)
    return {"message": "Password reset successfully. You can now login with your new password."}
