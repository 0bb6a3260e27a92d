import uuid
from sqlalchemy import Boolean, Column, String, Integer, Float, Text, TIMESTAMP, ForeignKey, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, true
from app.database import Base


class MembershipPlan(Base):
    """
    Paid plan granting listing quotas for `duration` days.
    Price is in rupees; Razorpay orders convert it to paise.
    """
    __tablename__ = "membership_plans"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    duration = Column(Integer, nullable=False)  # days
    featured_listings = Column(Integer, nullable=False, default=0, server_default="0")
    premium_listings = Column(Integer, nullable=False, default=0, server_default="0")
    basic_listings = Column(Integer, nullable=False, default=0, server_default="0")
    features = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    memberships = relationship("Membership", back_populates="plan")


class Membership(Base):
    __tablename__ = "memberships"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,  # one membership per user; renewals update the row
        nullable=False,
        index=True,
    )
    plan_id = Column(Uuid, ForeignKey("membership_plans.id", ondelete="RESTRICT"), nullable=False)
    start_date = Column(TIMESTAMP(timezone=True), nullable=False)
    end_date = Column(TIMESTAMP(timezone=True), nullable=False)
    status = Column(
        SAEnum("ACTIVE", "EXPIRED", "CANCELLED", name="membership_status"),
        nullable=False,
        default="ACTIVE",
        server_default="ACTIVE",
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="membership")
    plan = relationship("MembershipPlan", back_populates="memberships")


class MembershipRequest(Base):
    """Offline upgrade request reviewed by an admin (bank transfer, sales lead, ...)."""
    __tablename__ = "membership_requests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    plan_id = Column(Uuid, ForeignKey("membership_plans.id", ondelete="CASCADE"), nullable=False)
    current_plan = Column(String(100), nullable=True)
    requested_plan = Column(String(100), nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(
        SAEnum("PENDING", "APPROVED", "REJECTED", name="request_status"),
        nullable=False,
        default="PENDING",
        server_default="PENDING",
        index=True,
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User")
    plan = relationship("MembershipPlan")
