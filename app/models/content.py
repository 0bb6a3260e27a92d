import uuid
from sqlalchemy import Boolean, Column, String, Integer, Float, Text, TIMESTAMP, ForeignKey, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, false, true
from app.database import Base


class Advertisement(Base):
    __tablename__ = "advertisements"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    title = Column(String(200), nullable=False)
    image_url = Column(String(500), nullable=False)
    link_url = Column(String(500), nullable=True)
    position = Column(
        SAEnum("SIDEBAR", "HEADER", "FOOTER", "INLINE", name="ad_position"),
        nullable=False,
        index=True,
    )
    # Optional display window; unset bounds are open-ended
    start_date = Column(TIMESTAMP(timezone=True), nullable=True)
    end_date = Column(TIMESTAMP(timezone=True), nullable=True)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())


class Banner(Base):
    __tablename__ = "banners"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    title = Column(String(200), nullable=False)
    subtitle = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=False)
    link_url = Column(String(500), nullable=True)
    position = Column(
        SAEnum("HOT_ZONE", "PRIME_ZONE", "FEATURED_ZONE", "HOME_BANNER", name="banner_position"),
        nullable=False,
        index=True,
    )
    order = Column(Integer, nullable=False, default=0, server_default="0")
    start_date = Column(TIMESTAMP(timezone=True), nullable=True)
    end_date = Column(TIMESTAMP(timezone=True), nullable=True)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())


class FAQ(Base):
    __tablename__ = "faqs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    question = Column(String(500), nullable=False)
    answer = Column(Text, nullable=False)  # sanitised HTML
    category = Column(String(100), nullable=True, index=True)
    order = Column(Integer, nullable=False, default=0, server_default="0")
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())


class LoanOffer(Base):
    __tablename__ = "loan_offers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    bank_name = Column(String(200), nullable=False)
    logo_url = Column(String(500), nullable=True)
    interest_rate = Column(Float, nullable=False)  # percent per annum
    max_amount = Column(Float, nullable=True)
    min_amount = Column(Float, nullable=True)
    max_tenure = Column(Integer, nullable=True)  # years
    processing_fee = Column(String(100), nullable=True)
    features = Column(Text, nullable=True)
    link_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())


class Testimonial(Base):
    __tablename__ = "testimonials"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(100), nullable=False)
    role = Column(String(100), nullable=True)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False, default=5, server_default="5")
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())


class City(Base):
    __tablename__ = "cities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(100), unique=True, nullable=False)
    state = Column(String(100), nullable=False)
    image_url = Column(String(500), nullable=True)
    is_popular = Column(Boolean, default=False, server_default=false(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    localities = relationship(
        "Locality",
        back_populates="city",
        cascade="all, delete-orphan",
        order_by="Locality.name",
    )


class Locality(Base):
    __tablename__ = "localities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    city_id = Column(Uuid, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    pincode = Column(String(10), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    city = relationship("City", back_populates="localities")


class Category(Base):
    """Property categories shown in the site navigation; one level of nesting."""
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)
    image_url = Column(String(500), nullable=True)
    parent_id = Column(Uuid, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    order = Column(Integer, nullable=False, default=0, server_default="0")
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    parent = relationship("Category", remote_side=[id])


class SiteSetting(Base):
    """Free-form key/value site configuration (contact phone, social links, ...)."""
    __tablename__ = "site_settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
