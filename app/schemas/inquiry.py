import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.schemas.auth import validate_phone

InquiryStatus = Literal["PENDING", "RESPONDED", "CLOSED"]
ContactStatus = Literal["NEW", "READ", "REPLIED"]


class InquiryCreateRequest(BaseModel):
    receiver_id: uuid.UUID
    property_id: Optional[uuid.UUID] = None
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    message: str = Field(min_length=10, max_length=2000)

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone(v)


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus


class InquiryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sender_id: Optional[str] = None
    receiver_id: str
    property_id: Optional[str] = None
    property_title: Optional[str] = None
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    status: str
    created_at: datetime

    @field_validator("id", "sender_id", "receiver_id", "property_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> Optional[str]:
        if v is None:
            return None
        return str(v)

    @classmethod
    def from_inquiry(cls, inquiry) -> "InquiryOut":
        """Includes the listing title from the property relationship."""
        out = cls.model_validate(inquiry)
        out.property_title = inquiry.property.title if inquiry.property else None
        return out


class InquiryListResponse(BaseModel):
    total: int
    inquiries: List[InquiryOut]


class ContactCreateRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    subject: Optional[str] = Field(default=None, max_length=200)
    message: str = Field(min_length=10, max_length=2000)

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone(v)


class ContactStatusUpdate(BaseModel):
    status: ContactStatus


class ContactMessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: str
    status: str
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class ContactMessageListResponse(BaseModel):
    total: int
    page: int
    limit: int
    messages: List[ContactMessageOut]
