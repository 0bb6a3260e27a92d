"""
Payments router: Razorpay checkout for memberships and listing upgrades.

Razorpay payment flow:
  1. POST /payments/razorpay/order   → create Razorpay order, return checkout details
  2. [Frontend opens Razorpay checkout modal, user pays]
  3. POST /payments/razorpay/verify  → verify HMAC signature → grant plan / tier

The HMAC verification in step 3 is non-negotiable. Without it, anyone could
fake a payment by just sending random strings to the verify endpoint.
"""
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.core.dependencies import get_current_user
from app.core.exceptions import BadRequestException
from app.core.rate_limiter import rate_limit
from app.models.user import User
from app.schemas.membership import (
    OrderCreateRequest, OrderCreateResponse, PaymentVerifyRequest, PaymentVerifyResponse,
)
from app.services import payment_service, razorpay_service
from app.services.membership_service import get_active_plan

router = APIRouter()


@router.post(
    "/razorpay/order",
    response_model=OrderCreateResponse,
    dependencies=[Depends(rate_limit("api"))],
)
def create_razorpay_order(
    body: OrderCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Membership orders are priced from the plan (never from the client).
    Featured/premium upgrades carry the amount and property in the request.
    """
    notes = {"user_id": str(current_user.id), "type": body.type}

    if body.type == "membership" and body.plan_id is not None:
        plan = get_active_plan(db, body.plan_id)
        amount = plan.price
        description = f"{plan.name} membership"
        notes["plan_id"] = str(plan.id)
    elif body.type != "membership" and body.amount is not None:
        prop = payment_service.get_owned_property(db, current_user, body.property_id)
        amount = body.amount
        description = f"{body.type.capitalize()} listing upgrade"
        notes["property_id"] = str(prop.id)
    else:
        raise BadRequestException("Either plan_id or amount is required")

    order = razorpay_service.create_order(
        amount_inr=amount,
        receipt=razorpay_service.make_receipt(str(current_user.id)),
        notes=notes,
    )
    return OrderCreateResponse(
        order_id=order["id"],
        amount=order["amount"],
        currency=order["currency"],
        key_id=settings.razorpay_key_id or "",
        name=settings.app_name,
        description=description,
        prefill={"name": current_user.name, "email": current_user.email, "contact": current_user.phone},
    )


@router.post(
    "/razorpay/verify",
    response_model=PaymentVerifyResponse,
    dependencies=[Depends(rate_limit("api"))],
)
def verify_razorpay_payment(
    body: PaymentVerifyRequest,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Verify the Razorpay signature, then record the transaction and grant the
    plan or tier stored on the order. Replaying the same payment id returns
    the first result.
    """
    signature_valid = razorpay_service.verify_payment_signature(
        razorpay_order_id=body.razorpay_order_id,
        razorpay_payment_id=body.razorpay_payment_id,
        razorpay_signature=body.razorpay_signature,
    )
    if not signature_valid:
        raise BadRequestException("Payment verification failed. Invalid signature.")

    transaction = payment_service.apply_verified_payment(
        db,
        current_user,
        order_id=body.razorpay_order_id,
        payment_id=body.razorpay_payment_id,
        background_tasks=background_tasks,
    )
    return {
        "success": True,
        "message": "Payment verified successfully",
        "transaction_id": str(transaction.id),
    }
