"""
Membership plan, membership, upgrade request and Razorpay payment schemas.
"""
import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlanCreateRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    price: float = Field(ge=0)
    duration: int = Field(gt=0)  # days
    featured_listings: int = Field(default=0, ge=0)
    premium_listings: int = Field(default=0, ge=0)
    basic_listings: int = Field(default=0, ge=0)
    features: Optional[str] = None
    is_active: bool = True


class PlanUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    price: Optional[float] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, gt=0)
    featured_listings: Optional[int] = Field(default=None, ge=0)
    premium_listings: Optional[int] = Field(default=None, ge=0)
    basic_listings: Optional[int] = Field(default=None, ge=0)
    features: Optional[str] = None
    is_active: Optional[bool] = None


class PlanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    price: float
    duration: int
    featured_listings: int
    premium_listings: int
    basic_listings: int
    features: Optional[str] = None
    is_active: bool
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class MembershipOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    plan_id: str
    start_date: datetime
    end_date: datetime
    status: str
    plan: Optional[PlanOut] = None

    @field_validator("id", "user_id", "plan_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class MembershipRequestCreate(BaseModel):
    plan_id: uuid.UUID
    reason: Optional[str] = Field(default=None, max_length=1000)


class MembershipRequestReview(BaseModel):
    status: Literal["APPROVED", "REJECTED"]


class MembershipRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    plan_id: str
    current_plan: Optional[str] = None
    requested_plan: str
    reason: Optional[str] = None
    status: str
    created_at: datetime

    @field_validator("id", "user_id", "plan_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class MembershipRequestListResponse(BaseModel):
    total: int
    page: int
    limit: int
    requests: List[MembershipRequestOut]


# ── Razorpay ──────────────────────────────────────────────────────────────────

class OrderCreateRequest(BaseModel):
    """
    type=membership needs plan_id; featured/premium listing upgrades need
    amount (rupees) and property_id.
    """
    type: Literal["membership", "featured", "premium"]
    plan_id: Optional[uuid.UUID] = None
    amount: Optional[float] = Field(default=None, gt=0)
    property_id: Optional[uuid.UUID] = None


class OrderPrefill(BaseModel):
    name: str
    email: str
    contact: Optional[str] = None


class OrderCreateResponse(BaseModel):
    order_id: str
    amount: int  # paise
    currency: str
    key_id: str
    name: str
    description: str
    prefill: OrderPrefill


class PaymentVerifyRequest(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class PaymentVerifyResponse(BaseModel):
    success: bool
    message: str
    transaction_id: str


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    type: str
    amount: float
    currency: str
    status: str
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def uuid_to_str(cls, v) -> str:
        return str(v)


class TransactionListResponse(BaseModel):
    total: int
    page: int
    limit: int
    transactions: List[TransactionOut]


class TransactionStatusUpdate(BaseModel):
    status: Literal["PENDING", "COMPLETED", "FAILED", "REFUNDED"]
