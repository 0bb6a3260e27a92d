"""
User schemas: public profile views and update requests.
"""
from pydantic import BaseModel, field_validator, model_validator, ConfigDict
from typing import List, Optional
from datetime import datetime

from app.schemas.auth import validate_phone, validate_password
from app.schemas.notification import NotificationOut


class UserOut(BaseModel):
    """
    Public-safe user representation.
    hashed_password is never included: only the fields declared here are exposed.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    user_type: str
    is_active: bool
    is_verified: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None

    # UUID → str conversion for JSON serialization
    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class UserSummary(BaseModel):
    """Owner/sender card embedded in listings and inquiries."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    user_type: str

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class UserUpdateRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_valid(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if len(v) < 2 or len(v) > 100:
            raise ValueError("Name must be between 2 and 100 characters")
        return v

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone(v)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def password_strong(cls, v: str) -> str:
        return validate_password(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class AvatarUploadResponse(BaseModel):
    avatar_url: str
    message: str = "Avatar updated successfully"


class UserAuthResponse(BaseModel):
    """Returned alongside tokens after a successful login."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    user_type: str
    is_verified: bool
    avatar_url: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserAuthResponse


class DashboardStats(BaseModel):
    total_properties: int
    active_listings: int
    total_views: int
    total_inquiries: int
    total_favorites: int
    inquiries_trend: int  # percent change, this week vs last week


class DashboardProperty(BaseModel):
    id: str
    title: str
    status: str
    price: float
    views: int
    inquiries: int
    created_at: datetime


class DashboardInquiry(BaseModel):
    id: str
    name: str
    email: str
    message: str
    status: str
    property_title: Optional[str] = None
    created_at: datetime


class DashboardResponse(BaseModel):
    stats: DashboardStats
    recent_properties: List[DashboardProperty]
    recent_inquiries: List[DashboardInquiry]
    notifications: List[NotificationOut]
