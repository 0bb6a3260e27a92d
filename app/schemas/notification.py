from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    type: str
    title: str
    message: str
    link: Optional[str] = None
    # ORM attribute is `extra` (the column is named "metadata")
    metadata: Optional[dict] = Field(default=None, validation_alias="extra")
    read: bool
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class NotificationListResponse(BaseModel):
    notifications: List[NotificationOut]
    total: int
    unread_count: int
