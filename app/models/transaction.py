import uuid
from sqlalchemy import Column, String, Float, TIMESTAMP, ForeignKey, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(
        SAEnum("MEMBERSHIP", "LISTING_UPGRADE", "FEATURED", name="transaction_type"),
        nullable=False,
    )
    amount = Column(Float, nullable=False)  # rupees
    currency = Column(String(3), nullable=False, default="INR", server_default="INR")
    status = Column(
        SAEnum("PENDING", "COMPLETED", "FAILED", "REFUNDED", name="transaction_status"),
        nullable=False,
        default="PENDING",
        server_default="PENDING",
        index=True,
    )
    payment_method = Column(String(50), nullable=True)
    # Gateway payment id; used for idempotency on verify/webhook
    transaction_id = Column(String(200), nullable=True, index=True)
    description = Column(String(500), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="transactions")
