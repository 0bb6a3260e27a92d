import uuid
from sqlalchemy import Boolean, Column, String, TIMESTAMP, ForeignKey, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, false
from app.database import Base


class OTPRecord(Base):
    """
    Stores hashed OTPs for email verification and password reset.

    Security notes:
    - Raw OTP is NEVER stored, only the bcrypt hash.
    - Each new OTP request invalidates all previous unused OTPs for the same
      email + purpose combination.
    - OTPs expire after OTP_EXPIRY_MINUTES (10 min by default).
    """
    __tablename__ = "otp_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    email = Column(String(255), nullable=False, index=True)
    otp_hash = Column(String, nullable=False)  # bcrypt hash of the raw 6-digit OTP
    purpose = Column(
        SAEnum("verify_email", "forgot_password", name="otp_purpose"),
        nullable=False,
    )
    is_used = Column(Boolean, default=False, server_default=false(), nullable=False)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    # ── Relationships ──────────────────────────────────────────────────────────
    user = relationship("User", back_populates="otp_records")
