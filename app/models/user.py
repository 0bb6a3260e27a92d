import uuid
from sqlalchemy import Boolean, Column, String, Integer, Float, Text, TIMESTAMP, ForeignKey, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, false, true
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    phone = Column(String(20), nullable=True)
    avatar_url = Column(String(500), nullable=True)
    user_type = Column(
        SAEnum("INDIVIDUAL", "AGENT", "BUILDER", "ADMIN", name="user_type"),
        nullable=False,
        default="INDIVIDUAL",
        server_default="INDIVIDUAL",
        index=True,
    )

    # Flags
    # Deactivated accounts are rejected on every request, not just at login.
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    is_verified = Column(Boolean, default=False, server_default=false(), nullable=False)

    # Timestamps
    last_login_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────────
    agent_profile = relationship("AgentProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    builder_profile = relationship("BuilderProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    properties = relationship("Property", back_populates="owner", cascade="all, delete-orphan")
    favorites = relationship("Favorite", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    otp_records = relationship("OTPRecord", back_populates="user", cascade="all, delete-orphan")
    membership = relationship("Membership", back_populates="user", uselist=False, cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="user", cascade="all, delete-orphan")
    audit_logs = relationship(
        "AuditLog",
        back_populates="admin",
        foreign_keys="[AuditLog.admin_id]",
    )

    @property
    def is_admin(self) -> bool:
        return self.user_type == "ADMIN"


class AgentProfile(Base):
    """Public-facing profile created at registration for AGENT accounts."""
    __tablename__ = "agent_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,  # one profile per agent
        nullable=False,
        index=True,
    )
    agency_name = Column(String(200), nullable=True)
    license_number = Column(String(100), nullable=True)
    experience_years = Column(Integer, nullable=True)
    specialization = Column(String(200), nullable=True)
    city = Column(String(100), nullable=True, index=True)
    bio = Column(Text, nullable=True)
    rating = Column(Float, nullable=False, default=0, server_default="0")
    total_deals = Column(Integer, nullable=False, default=0, server_default="0")
    is_verified = Column(Boolean, default=False, server_default=false(), nullable=False)
    is_featured = Column(Boolean, default=False, server_default=false(), nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="agent_profile")


class BuilderProfile(Base):
    """Company profile created at registration for BUILDER accounts."""
    __tablename__ = "builder_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    company_name = Column(String(200), nullable=False)
    established_year = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    website = Column(String(500), nullable=True)
    logo_url = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True, index=True)
    is_verified = Column(Boolean, default=False, server_default=false(), nullable=False)
    is_featured = Column(Boolean, default=False, server_default=false(), nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="builder_profile")
    projects = relationship("Project", back_populates="builder", cascade="all, delete-orphan")
