"""
Property schemas: listing create/update bodies, list/detail views and search response.
"""
import re
import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.user import UserSummary

PropertyType = Literal["APARTMENT", "HOUSE", "VILLA", "PLOT", "COMMERCIAL", "PG", "ROOMMATE"]
ListingType = Literal["SELL", "RENT", "PG", "ROOMMATE"]
PropertyStatus = Literal["PENDING", "ACTIVE", "SOLD", "EXPIRED", "REJECTED"]
ListingTier = Literal["BASIC", "FEATURED", "PREMIUM"]
Furnishing = Literal["FURNISHED", "SEMI_FURNISHED", "UNFURNISHED"]
SortBy = Literal["newest", "price_asc", "price_desc", "popular"]

PINCODE_PATTERN = re.compile(r"^\d{5,10}$")


def _bounded(v: Optional[str], field: str, min_len: int, max_len: int) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if len(v) < min_len or len(v) > max_len:
        raise ValueError(f"{field} must be between {min_len} and {max_len} characters")
    return v


class PropertyBase(BaseModel):
    """Owner-editable listing fields; bounds shared by create and update."""
    title: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=5000)
    property_type: Optional[PropertyType] = None
    listing_type: Optional[ListingType] = None
    address: Optional[str] = None
    locality: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    bedrooms: Optional[int] = Field(default=None, ge=0, le=20)
    bathrooms: Optional[int] = Field(default=None, ge=0, le=20)
    balconies: Optional[int] = Field(default=None, ge=0, le=10)
    floor_number: Optional[int] = Field(default=None, ge=-5, le=200)
    total_floors: Optional[int] = Field(default=None, ge=1, le=200)
    facing: Optional[str] = Field(default=None, max_length=50)
    furnishing: Optional[Furnishing] = None
    built_up_area: Optional[float] = Field(default=None, gt=0)
    carpet_area: Optional[float] = Field(default=None, gt=0)
    plot_area: Optional[float] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, gt=0)
    price_per_sqft: Optional[float] = Field(default=None, gt=0)
    maintenance: Optional[float] = Field(default=None, ge=0)
    security_deposit: Optional[float] = Field(default=None, ge=0)
    images: Optional[List[str]] = None
    video_url: Optional[str] = Field(default=None, max_length=500)
    amenities: Optional[List[str]] = None
    available_from: Optional[datetime] = None
    project_id: Optional[uuid.UUID] = None

    @field_validator("title")
    @classmethod
    def title_valid(cls, v):
        return _bounded(v, "Title", 5, 200)

    @field_validator("address")
    @classmethod
    def address_valid(cls, v):
        return _bounded(v, "Address", 5, 500)

    @field_validator("locality", "city", "state")
    @classmethod
    def place_valid(cls, v, info):
        return _bounded(v, info.field_name.capitalize(), 2, 100)

    @field_validator("pincode")
    @classmethod
    def pincode_valid(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if not PINCODE_PATTERN.match(v):
            raise ValueError("Invalid pincode")
        return v


class PropertyCreateRequest(PropertyBase):
    title: str
    property_type: PropertyType
    listing_type: ListingType
    address: str
    locality: str
    city: str
    state: str
    price: float = Field(gt=0)


class PropertyUpdateRequest(PropertyBase):
    """Partial update; only fields sent by the client are applied."""
    pass


class PropertyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    project_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    property_type: str
    listing_type: str
    address: str
    locality: str
    city: str
    state: str
    pincode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    balconies: Optional[int] = None
    floor_number: Optional[int] = None
    total_floors: Optional[int] = None
    facing: Optional[str] = None
    furnishing: Optional[str] = None
    built_up_area: Optional[float] = None
    carpet_area: Optional[float] = None
    plot_area: Optional[float] = None
    price: float
    price_per_sqft: Optional[float] = None
    maintenance: Optional[float] = None
    security_deposit: Optional[float] = None
    images: List[str] = []
    video_url: Optional[str] = None
    amenities: List[str] = []
    status: str
    listing_tier: str
    views: int
    available_from: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("id", "user_id", "project_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> Optional[str]:
        if v is None:
            return None
        return str(v)

    @field_validator("images", "amenities", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []


class PropertyListItem(PropertyOut):
    """Search result card with the lister's contact details."""
    owner: Optional[UserSummary] = None


class PropertyDetailOut(PropertyListItem):
    """Single listing page; same fields as a search result."""


class PropertySummary(BaseModel):
    """Compact card used inside favorites, projects and agent pages."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    property_type: str
    listing_type: str
    locality: str
    city: str
    price: float
    bedrooms: Optional[int] = None
    images: List[str] = []
    status: str
    listing_tier: str

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)

    @field_validator("images", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PropertyListResponse(BaseModel):
    properties: List[PropertyListItem]
    pagination: Pagination


# ── Favorites ─────────────────────────────────────────────────────────────────

class FavoriteCreateRequest(BaseModel):
    property_id: uuid.UUID


class FavoriteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    property_id: str
    created_at: datetime
    property: PropertySummary

    @field_validator("id", "property_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)
