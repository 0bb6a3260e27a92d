import uuid
from sqlalchemy import Column, String, Integer, Float, Text, TIMESTAMP, ForeignKey, JSON, Uuid, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Property(Base):
    """
    A single listing (sale, rent, PG or roommate).

    New listings always start PENDING and only become publicly searchable once
    an admin approves them (status ACTIVE).
    """
    __tablename__ = "properties"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id = Column(
        Uuid,
        # SET NULL: a listing outlives the project it was attached to
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    property_type = Column(
        SAEnum("APARTMENT", "HOUSE", "VILLA", "PLOT", "COMMERCIAL", "PG", "ROOMMATE", name="property_type"),
        nullable=False,
        index=True,
    )
    listing_type = Column(
        SAEnum("SELL", "RENT", "PG", "ROOMMATE", name="listing_type"),
        nullable=False,
        index=True,
    )

    # Location
    address = Column(String(500), nullable=False)
    locality = Column(String(100), nullable=False, index=True)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100), nullable=False)
    pincode = Column(String(10), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Layout
    bedrooms = Column(Integer, nullable=True, index=True)
    bathrooms = Column(Integer, nullable=True)
    balconies = Column(Integer, nullable=True)
    floor_number = Column(Integer, nullable=True)
    total_floors = Column(Integer, nullable=True)
    facing = Column(String(50), nullable=True)
    furnishing = Column(
        SAEnum("FURNISHED", "SEMI_FURNISHED", "UNFURNISHED", name="furnishing_type"),
        nullable=True,
    )
    built_up_area = Column(Float, nullable=True)
    carpet_area = Column(Float, nullable=True)
    plot_area = Column(Float, nullable=True)

    # Pricing
    price = Column(Float, nullable=False, index=True)
    price_per_sqft = Column(Float, nullable=True)
    maintenance = Column(Float, nullable=True)
    security_deposit = Column(Float, nullable=True)

    # Media: lists of URLs / amenity names
    images = Column(JSON, nullable=True)
    video_url = Column(String(500), nullable=True)
    amenities = Column(JSON, nullable=True)

    status = Column(
        SAEnum("PENDING", "ACTIVE", "SOLD", "EXPIRED", "REJECTED", name="property_status"),
        nullable=False,
        default="PENDING",
        server_default="PENDING",
        index=True,
    )
    listing_tier = Column(
        SAEnum("BASIC", "FEATURED", "PREMIUM", name="listing_tier"),
        nullable=False,
        default="BASIC",
        server_default="BASIC",
    )
    views = Column(Integer, nullable=False, default=0, server_default="0")
    available_from = Column(TIMESTAMP(timezone=True), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), index=True)
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────────
    owner = relationship("User", back_populates="properties")
    project = relationship("Project", back_populates="properties")
    favorites = relationship("Favorite", back_populates="property", cascade="all, delete-orphan")
    inquiries = relationship("Inquiry", back_populates="property")


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (
        # a property can be saved once per user
        UniqueConstraint("user_id", "property_id", name="uq_favorites_user_property"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    property_id = Column(Uuid, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="favorites")
    property = relationship("Property", back_populates="favorites")
