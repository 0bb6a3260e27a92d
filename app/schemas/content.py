"""
Site content managed from the back office: ads, banners, FAQs, loan offers,
testimonials, cities, localities, categories and site settings.
"""
import re
import uuid
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

AdPosition = Literal["SIDEBAR", "HEADER", "FOOTER", "INLINE"]
BannerPosition = Literal["HOT_ZONE", "PRIME_ZONE", "FEATURED_ZONE", "HOME_BANNER"]


class _IdOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


# ── Advertisements ────────────────────────────────────────────────────────────

class AdCreateRequest(BaseModel):
    title: str = Field(min_length=2, max_length=200)
    image_url: str = Field(max_length=500)
    link_url: Optional[str] = Field(default=None, max_length=500)
    position: AdPosition
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True


class AdUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=200)
    image_url: Optional[str] = Field(default=None, max_length=500)
    link_url: Optional[str] = Field(default=None, max_length=500)
    position: Optional[AdPosition] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None


class AdOut(_IdOut):
    title: str
    image_url: str
    link_url: Optional[str] = None
    position: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool


# ── Banners ───────────────────────────────────────────────────────────────────

class BannerCreateRequest(BaseModel):
    title: str = Field(min_length=2, max_length=200)
    subtitle: Optional[str] = Field(default=None, max_length=500)
    image_url: str = Field(max_length=500)
    link_url: Optional[str] = Field(default=None, max_length=500)
    position: BannerPosition
    order: int = Field(default=0, ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True


class BannerUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=200)
    subtitle: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = Field(default=None, max_length=500)
    link_url: Optional[str] = Field(default=None, max_length=500)
    position: Optional[BannerPosition] = None
    order: Optional[int] = Field(default=None, ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None


class BannerOut(_IdOut):
    title: str
    subtitle: Optional[str] = None
    image_url: str
    link_url: Optional[str] = None
    position: str
    order: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool


# ── FAQs ──────────────────────────────────────────────────────────────────────

class FAQCreateRequest(BaseModel):
    question: str = Field(min_length=10, max_length=500)
    answer: str = Field(min_length=10, max_length=5000)
    category: Optional[str] = Field(default=None, max_length=100)
    order: int = Field(default=0, ge=0)
    is_active: bool = True


class FAQUpdateRequest(BaseModel):
    question: Optional[str] = Field(default=None, min_length=10, max_length=500)
    answer: Optional[str] = Field(default=None, min_length=10, max_length=5000)
    category: Optional[str] = Field(default=None, max_length=100)
    order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class FAQOut(_IdOut):
    question: str
    answer: str
    category: Optional[str] = None
    order: int
    is_active: bool


# ── Loan offers ───────────────────────────────────────────────────────────────

class LoanCreateRequest(BaseModel):
    bank_name: str = Field(min_length=2, max_length=200)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    interest_rate: float = Field(gt=0, le=100)
    max_amount: Optional[float] = Field(default=None, gt=0)
    min_amount: Optional[float] = Field(default=None, gt=0)
    max_tenure: Optional[int] = Field(default=None, gt=0)
    processing_fee: Optional[str] = Field(default=None, max_length=100)
    features: Optional[str] = None
    link_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True


class LoanUpdateRequest(BaseModel):
    bank_name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    interest_rate: Optional[float] = Field(default=None, gt=0, le=100)
    max_amount: Optional[float] = Field(default=None, gt=0)
    min_amount: Optional[float] = Field(default=None, gt=0)
    max_tenure: Optional[int] = Field(default=None, gt=0)
    processing_fee: Optional[str] = Field(default=None, max_length=100)
    features: Optional[str] = None
    link_url: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None


class LoanOut(_IdOut):
    bank_name: str
    logo_url: Optional[str] = None
    interest_rate: float
    max_amount: Optional[float] = None
    min_amount: Optional[float] = None
    max_tenure: Optional[int] = None
    processing_fee: Optional[str] = None
    features: Optional[str] = None
    link_url: Optional[str] = None
    is_active: bool


# ── Testimonials ──────────────────────────────────────────────────────────────

class TestimonialCreateRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    role: Optional[str] = Field(default=None, max_length=100)
    content: str = Field(min_length=10, max_length=1000)
    rating: int = Field(default=5, ge=1, le=5)
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True


class TestimonialUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    role: Optional[str] = Field(default=None, max_length=100)
    content: Optional[str] = Field(default=None, min_length=10, max_length=1000)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None


class TestimonialOut(_IdOut):
    name: str
    role: Optional[str] = None
    content: str
    rating: int
    image_url: Optional[str] = None
    is_active: bool


# ── Cities & localities ───────────────────────────────────────────────────────

def _pincode(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    if not re.match(r"^\d{5,10}$", v):
        raise ValueError("Invalid pincode")
    return v


class CityCreateRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    state: str = Field(min_length=2, max_length=100)
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_popular: bool = False


class CityUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    state: Optional[str] = Field(default=None, min_length=2, max_length=100)
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_popular: Optional[bool] = None


class LocalityCreateRequest(BaseModel):
    city_id: uuid.UUID
    name: str = Field(min_length=2, max_length=100)
    pincode: Optional[str] = None

    @field_validator("pincode")
    @classmethod
    def pincode_valid(cls, v):
        return _pincode(v)


class LocalityUpdateRequest(BaseModel):
    city_id: Optional[uuid.UUID] = None
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    pincode: Optional[str] = None

    @field_validator("pincode")
    @classmethod
    def pincode_valid(cls, v):
        return _pincode(v)


class LocalityOut(_IdOut):
    city_id: str
    name: str
    pincode: Optional[str] = None

    @field_validator("city_id", mode="before")
    @classmethod
    def city_id_to_str(cls, v) -> str:
        return str(v)


class CityOut(_IdOut):
    name: str
    state: str
    image_url: Optional[str] = None
    is_popular: bool
    localities: List[LocalityOut] = []


# ── Categories ────────────────────────────────────────────────────────────────

class CategoryCreateRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    icon: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = Field(default=None, max_length=500)
    parent_id: Optional[uuid.UUID] = None
    order: int = Field(default=0, ge=0)
    is_active: bool = True


class CategoryUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    icon: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = Field(default=None, max_length=500)
    parent_id: Optional[uuid.UUID] = None
    order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class CategoryOut(_IdOut):
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    image_url: Optional[str] = None
    parent_id: Optional[str] = None
    order: int
    is_active: bool

    @field_validator("parent_id", mode="before")
    @classmethod
    def parent_id_to_str(cls, v) -> Optional[str]:
        return str(v) if v is not None else None


# ── Site settings ─────────────────────────────────────────────────────────────

SETTING_KEY = r"^[a-z][a-z0-9_.]{0,99}$"


class SiteSettingsUpdateRequest(BaseModel):
    """Keys not sent are left alone; an empty string value stores an empty setting."""
    settings: Dict[str, str] = Field(min_length=1)

    @field_validator("settings")
    @classmethod
    def keys_valid(cls, v: Dict[str, str]) -> Dict[str, str]:
        for key, value in v.items():
            if not re.match(SETTING_KEY, key):
                raise ValueError(f"Invalid setting key '{key}'")
            if len(value) > 5000:
                raise ValueError(f"Setting '{key}' is too long")
        return v


class SiteSettingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    value: str
    updated_at: Optional[datetime] = None
