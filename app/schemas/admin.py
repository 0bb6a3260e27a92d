from pydantic import BaseModel, field_validator, ConfigDict
from typing import Literal, Optional, List
from datetime import datetime

from app.schemas.project import AgentOut, BuilderOut
from app.schemas.property import PropertyOut
from app.schemas.user import UserOut


class AdminStatsResponse(BaseModel):
    """Dashboard stats for admin panel."""
    total_users: int
    total_properties: int
    pending_properties: int
    active_properties: int
    total_inquiries: int
    total_agents: int
    total_builders: int
    total_contact_messages: int
    recent_pending: List[PropertyOut]


class AdminUserListResponse(BaseModel):
    total: int
    page: int
    limit: int
    users: List[UserOut]


class AdminUserUpdateRequest(BaseModel):
    is_active: Optional[bool] = None
    is_verified: Optional[bool] = None
    user_type: Optional[Literal["INDIVIDUAL", "AGENT", "BUILDER", "ADMIN"]] = None


class AdminPropertyListResponse(BaseModel):
    total: int
    page: int
    limit: int
    properties: List[PropertyOut]


class AdminPropertyUpdateRequest(BaseModel):
    status: Optional[Literal["PENDING", "ACTIVE", "SOLD", "EXPIRED", "REJECTED"]] = None
    listing_tier: Optional[Literal["BASIC", "FEATURED", "PREMIUM"]] = None


class RejectPropertyRequest(BaseModel):
    reason: Optional[str] = None


class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    admin_id: Optional[str] = None
    action: str
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    details: Optional[dict] = None
    created_at: datetime

    @field_validator("id", "admin_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> Optional[str]:
        if v is None:
            return None
        return str(v)


class AuditLogListResponse(BaseModel):
    total: int
    page: int
    limit: int
    logs: List[AuditLogOut]


class FeaturedStats(BaseModel):
    total_agents: int
    featured_agents: int
    total_builders: int
    featured_builders: int


class FeaturedDirectoryResponse(BaseModel):
    """Agents and builders promoted on the home page."""
    stats: FeaturedStats
    agents: List[AgentOut]
    builders: List[BuilderOut]


class FeatureToggleRequest(BaseModel):
    is_featured: bool
