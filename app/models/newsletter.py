import uuid
from sqlalchemy import Boolean, Column, String, TIMESTAMP, Uuid
from sqlalchemy.sql import func, true
from app.database import Base


class NewsletterSubscription(Base):
    __tablename__ = "newsletter_subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # Unsubscribing deactivates the row so re-subscribing keeps history
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
