"""
Schemas for builder projects and the agent/builder directory.
"""
import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.property import PropertySummary
from app.schemas.user import UserSummary

ProjectStatus = Literal["ONGOING", "COMPLETED", "UPCOMING"]


class ProjectCreateRequest(BaseModel):
    builder_id: uuid.UUID
    name: str = Field(min_length=3, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: ProjectStatus = "ONGOING"
    location: str = Field(min_length=3, max_length=500)
    city: str = Field(min_length=2, max_length=100)
    state: str = Field(min_length=2, max_length=100)
    start_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    total_units: Optional[int] = Field(default=None, gt=0)
    available_units: Optional[int] = Field(default=None, ge=0)
    price_range: Optional[str] = Field(default=None, max_length=100)
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_featured: bool = False
    is_popular: bool = False


class ProjectUpdateRequest(BaseModel):
    builder_id: Optional[uuid.UUID] = None
    name: Optional[str] = Field(default=None, min_length=3, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: Optional[ProjectStatus] = None
    location: Optional[str] = Field(default=None, min_length=3, max_length=500)
    city: Optional[str] = Field(default=None, min_length=2, max_length=100)
    state: Optional[str] = Field(default=None, min_length=2, max_length=100)
    start_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    total_units: Optional[int] = Field(default=None, gt=0)
    available_units: Optional[int] = Field(default=None, ge=0)
    price_range: Optional[str] = Field(default=None, max_length=100)
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    is_popular: Optional[bool] = None


class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    builder_id: str
    name: str
    description: Optional[str] = None
    status: str
    location: str
    city: str
    state: str
    start_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    total_units: Optional[int] = None
    available_units: Optional[int] = None
    price_range: Optional[str] = None
    amenities: List[str] = []
    images: List[str] = []
    is_featured: bool
    is_popular: bool
    created_at: datetime

    @field_validator("id", "builder_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)

    @field_validator("amenities", "images", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []


class ProjectListResponse(BaseModel):
    total: int
    page: int
    limit: int
    projects: List[ProjectOut]


class BuilderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    company_name: str
    logo_url: Optional[str] = None
    city: Optional[str] = None
    is_verified: bool

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class ProjectDetailOut(ProjectOut):
    builder: Optional[BuilderSummary] = None
    properties: List[PropertySummary] = []


# ── Agents ────────────────────────────────────────────────────────────────────

class AgentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    agency_name: Optional[str] = None
    license_number: Optional[str] = None
    experience_years: Optional[int] = None
    specialization: Optional[str] = None
    city: Optional[str] = None
    bio: Optional[str] = None
    rating: float
    total_deals: int
    is_verified: bool
    is_featured: bool = False
    created_at: datetime
    user: Optional[UserSummary] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class AgentDetailOut(AgentOut):
    properties: List[PropertySummary] = []


class AgentListResponse(BaseModel):
    total: int
    page: int
    limit: int
    agents: List[AgentOut]


class AgentProfileUpdateRequest(BaseModel):
    agency_name: Optional[str] = Field(default=None, max_length=200)
    license_number: Optional[str] = Field(default=None, max_length=100)
    experience_years: Optional[int] = Field(default=None, ge=0, le=80)
    specialization: Optional[str] = Field(default=None, max_length=200)
    city: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=2000)


# ── Builders ──────────────────────────────────────────────────────────────────

class BuilderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    company_name: str
    established_year: Optional[int] = None
    description: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    city: Optional[str] = None
    is_verified: bool
    is_featured: bool = False
    created_at: datetime
    user: Optional[UserSummary] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class BuilderDetailOut(BuilderOut):
    projects: List[ProjectOut] = []


class BuilderListResponse(BaseModel):
    total: int
    page: int
    limit: int
    builders: List[BuilderOut]


class BuilderProfileUpdateRequest(BaseModel):
    company_name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    established_year: Optional[int] = Field(default=None, ge=1800, le=2100)
    description: Optional[str] = Field(default=None, max_length=5000)
    website: Optional[str] = Field(default=None, max_length=500)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
