from datetime import datetime
from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class NewsletterSubscribeRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def email_lower(cls, v: str) -> str:
        return v.lower()


class SubscriberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    is_active: bool
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class SubscriberListResponse(BaseModel):
    total: int
    active_count: int
    subscribers: List[SubscriberOut]


class NewsletterSendRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    # "all" sends to every active subscriber
    recipients: Union[Literal["all"], List[EmailStr]] = "all"


class NewsletterSendResponse(BaseModel):
    message: str
    sent: int
    failed: int
