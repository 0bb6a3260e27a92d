"""
Applies verified Razorpay payments to the account: transaction ledger,
membership activation and listing tier upgrades. Signature checks live in
razorpay_service; this module assumes the caller already verified them.
"""
import logging
import uuid
from typing import Optional

from razorpay.errors import BadRequestError, GatewayError, ServerError
from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from app.core.exceptions import (
    BadRequestException, ForbiddenException, NotFoundException, ServiceUnavailableException,
)
from app.models.membership import MembershipPlan
from app.models.property import Property
from app.models.transaction import Transaction
from app.models.user import User
from app.services import email_service, razorpay_service
from app.services.membership_service import activate_membership, get_active_plan
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)

# Razorpay order "type" → Transaction.type
TRANSACTION_TYPES = {
    "membership": "MEMBERSHIP",
    "featured": "LISTING_UPGRADE",
    "premium": "LISTING_UPGRADE",
}


def get_owned_property(db: Session, user: User, property_id: Optional[uuid.UUID]) -> Property:
    if property_id is None:
        raise NotFoundException("Property")
    prop = db.query(Property).filter(Property.id == property_id).first()
    if not prop:
        raise NotFoundException("Property")
    if prop.user_id != user.id:
        raise ForbiddenException("You can only upgrade your own listings")
    return prop


def _paid_amount(payment_id: str, fallback: float) -> float:
    """Amount actually captured, in rupees; `fallback` when the gateway lookup fails."""
    try:
        payment = razorpay_service.fetch_payment(payment_id)
    except (BadRequestError, GatewayError, ServerError):
        logger.warning("Could not fetch Razorpay payment", extra={"payment_id": payment_id})
        return fallback
    return payment.get("amount", 0) / 100


def _note_uuid(notes: dict, key: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(notes[key]))
    except (KeyError, ValueError):
        return None


def load_order_notes(order_id: str, user: User) -> dict:
    """
    What the order was created for, read back from Razorpay.
    The client only proves it paid this order; the order decides what it bought.
    """
    try:
        order = razorpay_service.fetch_order(order_id)
    except BadRequestError:
        raise BadRequestException("Unknown Razorpay order")
    except (GatewayError, ServerError):
        logger.warning("Could not fetch Razorpay order", extra={"order_id": order_id})
        raise ServiceUnavailableException()

    notes = order.get("notes") or {}
    if notes.get("user_id") != str(user.id):
        logger.warning(
            "Razorpay order belongs to another account",
            extra={"event": "security", "order_id": order_id, "user_id": str(user.id)},
        )
        raise ForbiddenException("This order belongs to another account")
    if notes.get("type") not in TRANSACTION_TYPES:
        raise BadRequestException("Order has no purchase attached")

    notes = dict(notes)
    notes["amount"] = order.get("amount", 0) / 100
    return notes


def apply_verified_payment(
    db: Session,
    user: User,
    order_id: str,
    payment_id: str,
    background_tasks: Optional[BackgroundTasks] = None,
) -> Transaction:
    """
    Records a COMPLETED transaction and grants what the order was created for.
    Calling it again with the same payment id returns the existing transaction.
    """
    existing = (
        db.query(Transaction)
        .filter(Transaction.transaction_id == payment_id, Transaction.status == "COMPLETED")
        .first()
    )
    if existing:
        logger.info("Razorpay payment already processed", extra={"payment_id": payment_id})
        return existing

    notes = load_order_notes(order_id, user)
    type = notes["type"]

    plan: Optional[MembershipPlan] = None
    prop: Optional[Property] = None
    if type == "membership":
        plan = get_active_plan(db, _note_uuid(notes, "plan_id"))
        expected = plan.price
    else:
        prop = get_owned_property(db, user, _note_uuid(notes, "property_id"))
        expected = notes["amount"]

    transaction = Transaction(
        user_id=user.id,
        type=TRANSACTION_TYPES[type],
        amount=_paid_amount(payment_id, expected),
        currency="INR",
        status="COMPLETED",
        payment_method="razorpay",
        transaction_id=payment_id,
        description=f"Razorpay payment - Order: {order_id}",
    )
    db.add(transaction)

    if plan is not None:
        membership = activate_membership(db, user.id, plan, commit=False)
        db.commit()
        create_notification(
            db,
            user.id,
            "membership_activated",
            "Membership activated",
            f"Your {plan.name} membership is active.",
            link="/dashboard",
            metadata={"plan_id": str(plan.id), "payment_id": payment_id},
        )
        if background_tasks is not None:
            background_tasks.add_task(
                email_service.send_membership_activated_email,
                user.email, user.name, plan.name, membership.end_date,
            )
    else:
        prop.listing_tier = type.upper()
        db.commit()
        create_notification(
            db,
            user.id,
            "payment_success",
            "Listing upgraded",
            f"\"{prop.title}\" is now a {type.capitalize()} listing.",
            link=f"/properties/{prop.id}",
            metadata={"property_id": str(prop.id), "payment_id": payment_id},
        )

    db.refresh(transaction)
    logger.info(
        "Razorpay payment verified and processed",
        extra={"order_id": order_id, "payment_id": payment_id, "user_id": str(user.id), "type": type},
    )
    return transaction


# ── Webhooks ──────────────────────────────────────────────────────────────────

def _notes_user(db: Session, notes: dict) -> Optional[User]:
    raw = (notes or {}).get("user_id")
    if not raw:
        return None
    try:
        user_id = uuid.UUID(raw)
    except ValueError:
        return None
    return db.query(User).filter(User.id == user_id).first()


def handle_payment_captured(db: Session, entity: dict) -> int:
    """Marks our transactions for this payment COMPLETED. Returns rows updated."""
    user = _notes_user(db, entity.get("notes"))
    logger.info(
        "Razorpay payment captured",
        extra={"payment_id": entity.get("id"), "amount": entity.get("amount", 0) / 100},
    )
    if user is None:
        return 0

    updated = (
        db.query(Transaction)
        .filter(Transaction.transaction_id == entity.get("id"), Transaction.user_id == user.id)
        .update({"status": "COMPLETED"}, synchronize_session=False)
    )
    db.commit()
    return updated


def handle_payment_failed(
    db: Session,
    entity: dict,
    background_tasks: Optional[BackgroundTasks] = None,
) -> Optional[Transaction]:
    """Records a FAILED transaction, then notifies and emails the payer."""
    notes = entity.get("notes") or {}
    user = _notes_user(db, notes)
    logger.warning(
        "Razorpay payment failed",
        extra={"payment_id": entity.get("id"), "order_id": entity.get("order_id")},
    )
    if user is None:
        return None

    amount = entity.get("amount", 0) / 100
    reason = entity.get("error_description")
    transaction = Transaction(
        user_id=user.id,
        type=TRANSACTION_TYPES.get(notes.get("type"), "MEMBERSHIP"),
        amount=amount,
        currency=(entity.get("currency") or "INR").upper(),
        status="FAILED",
        payment_method="razorpay",
        transaction_id=entity.get("id"),
        description=f"Failed payment - Order: {entity.get('order_id')}",
    )
    db.add(transaction)
    db.commit()
    db.refresh(transaction)

    create_notification(
        db,
        user.id,
        "payment_failed",
        "Payment failed",
        f"Your payment of Rs. {amount:,.2f} could not be processed.",
        metadata={"payment_id": entity.get("id"), "order_id": entity.get("order_id")},
    )
    if background_tasks is not None:
        background_tasks.add_task(email_service.send_payment_failed_email, user.email, user.name, amount, reason)
    return transaction


def handle_webhook_event(db: Session, event: dict, background_tasks: Optional[BackgroundTasks] = None) -> None:
    name = event.get("event")
    payment = ((event.get("payload") or {}).get("payment") or {}).get("entity")
    logger.info("Razorpay webhook received", extra={"webhook_event": name})

    if name == "payment.captured" and payment:
        handle_payment_captured(db, payment)
    elif name == "payment.failed" and payment:
        handle_payment_failed(db, payment, background_tasks)
    else:
        logger.debug("Unhandled Razorpay webhook event", extra={"webhook_event": name})
