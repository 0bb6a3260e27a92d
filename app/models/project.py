import uuid
from sqlalchemy import Boolean, Column, String, Integer, Text, TIMESTAMP, ForeignKey, JSON, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, false
from app.database import Base


class Project(Base):
    """A builder's development; individual units are listed as Property rows."""
    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    builder_id = Column(
        Uuid,
        ForeignKey("builder_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        SAEnum("ONGOING", "COMPLETED", "UPCOMING", name="project_status"),
        nullable=False,
        default="ONGOING",
        server_default="ONGOING",
        index=True,
    )
    location = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100), nullable=False)
    start_date = Column(TIMESTAMP(timezone=True), nullable=True)
    completion_date = Column(TIMESTAMP(timezone=True), nullable=True)
    total_units = Column(Integer, nullable=True)
    available_units = Column(Integer, nullable=True)
    price_range = Column(String(100), nullable=True)
    amenities = Column(JSON, nullable=True)
    images = Column(JSON, nullable=True)
    is_featured = Column(Boolean, default=False, server_default=false(), nullable=False)
    is_popular = Column(Boolean, default=False, server_default=false(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    builder = relationship("BuilderProfile", back_populates="projects")
    properties = relationship("Property", back_populates="project")
