import uuid
from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Inquiry(Base):
    """
    A buyer/renter message to a listing owner, agent or builder.
    sender_id is nullable: anonymous visitors can send inquiries too.
    """
    __tablename__ = "inquiries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    sender_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    receiver_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    property_id = Column(Uuid, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(
        SAEnum("PENDING", "RESPONDED", "CLOSED", name="inquiry_status"),
        nullable=False,
        default="PENDING",
        server_default="PENDING",
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), index=True)

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
    property = relationship("Property", back_populates="inquiries")


class ContactMessage(Base):
    """Site-wide contact form submissions, handled from the admin enquiries screen."""
    __tablename__ = "contact_messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    subject = Column(String(200), nullable=True)
    message = Column(Text, nullable=False)
    status = Column(
        SAEnum("NEW", "READ", "REPLIED", name="contact_message_status"),
        nullable=False,
        default="NEW",
        server_default="NEW",
        index=True,
    )
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
