"""
OTP service: generation, storage (hashed), and verification.

Security design decisions:
  1. Raw OTP is NEVER stored, only its bcrypt hash.
  2. New OTP request invalidates all previous unused OTPs for same email+purpose.
  3. OTPs expire after 10 minutes.
  4. secrets.randbelow() is cryptographically secure (unlike random.randint).
  5. Brute force of the 6-digit code is throttled by the "auth" rate limit profile.
"""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid

from sqlalchemy.orm import Session

from app.models.otp import OTPRecord
from app.core.security import pwd_context

OTP_EXPIRY_MINUTES = 10

OTP_PURPOSES = ("verify_email", "forgot_password")


def generate_otp() -> str:
    """
    Generate a cryptographically secure 6-digit OTP.
    secrets.randbelow(900000) gives 0–899999, +100000 gives 100000–999999.
    """
    return str(secrets.randbelow(900000) + 100000)


def create_otp_record(
    db: Session,
    email: str,
    purpose: str,
    user_id: Optional[uuid.UUID] = None,
) -> str:
    """
    Creates a new OTP record in the DB and returns the raw OTP.
    The raw value is only handed to the email service, never stored.
    """
    if purpose not in OTP_PURPOSES:
        raise ValueError(f"Unknown OTP purpose: {purpose}")

    # invalidate previous OTPs for this email+purpose
    db.query(OTPRecord).filter(
        OTPRecord.email == email,
        OTPRecord.purpose == purpose,
        OTPRecord.is_used == False,
    ).update({"is_used": True}, synchronize_session=False)

    raw_otp = generate_otp()

    record = OTPRecord(
        email=email,
        user_id=user_id,
        otp_hash=pwd_context.hash(raw_otp),
        purpose=purpose,
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=OTP_EXPIRY_MINUTES),
    )
    db.add(record)
    db.commit()

    return raw_otp


def verify_otp_record(db: Session, email: str, otp: str, purpose: str) -> bool:
    """
    Verifies an OTP against the stored hash.

    Returns True if valid, False otherwise.
    On success, marks the record as used (one-time use).
    """
    record = (
        db.query(OTPRecord)
        .filter(
            OTPRecord.email == email,
            OTPRecord.purpose == purpose,
            OTPRecord.is_used == False,
            OTPRecord.expires_at > datetime.now(timezone.utc),
        )
        .order_by(OTPRecord.created_at.desc())
        .first()
    )

    if not record:
        return False

    if not pwd_context.verify(otp, record.otp_hash):
        return False

    record.is_used = True
    db.commit()
    return True
