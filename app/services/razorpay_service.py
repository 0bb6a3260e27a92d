"""
Razorpay payment service.

Flow:
  1. Frontend calls POST /payments/razorpay/order → backend creates Razorpay order
  2. Backend returns {order_id, amount, key_id} to frontend
  3. Frontend opens Razorpay JS checkout modal, user pays
  4. Razorpay returns {payment_id, order_id, signature} to frontend
  5. Frontend POSTs all three to POST /payments/razorpay/verify
  6. Backend verifies HMAC-SHA256 signature (CRITICAL security step)
  7. If valid, backend activates the membership / upgrades the listing

WITHOUT step 6, anyone could fake a successful payment by sending any strings.
The signature is an HMAC of "{order_id}|{payment_id}" using your Razorpay secret.

Razorpay also POSTs server-to-server webhooks to /webhooks/razorpay, signed
with the separate webhook secret over the raw request body.
"""
import hmac
import hashlib
import logging
import time
from functools import lru_cache
from typing import Optional

import razorpay

from app.config import settings
from app.core.exceptions import ServiceUnavailableException

logger = logging.getLogger(__name__)


@lru_cache()
def get_client() -> razorpay.Client:
    if not settings.razorpay_configured:
        raise ServiceUnavailableException("Payment gateway")
    return razorpay.Client(auth=(settings.razorpay_key_id, settings.razorpay_key_secret))


def to_paise(amount_inr: float) -> int:
    """Razorpay amounts are in PAISE (1 rupee = 100 paise)."""
    return int(round(amount_inr * 100))


def make_receipt(user_id: str) -> str:
    """Receipt ids are capped at 40 chars by Razorpay."""
    return f"rcpt_{str(user_id)[:8]}_{int(time.time() * 1000)}"


def create_order(amount_inr: float, receipt: str, notes: Optional[dict] = None, currency: str = "INR") -> dict:
    """
    Create a Razorpay order.

    Returns:
        Razorpay order dict containing 'id', 'amount', 'currency', etc.
    """
    data = {
        "amount": to_paise(amount_inr),
        "currency": currency,
        "receipt": receipt,
        "notes": notes or {},
        "payment_capture": 1,  # auto-capture payment on success
    }
    order = get_client().order.create(data=data)
    logger.info("Razorpay order created", extra={"order_id": order.get("id"), "amount": data["amount"], "receipt": receipt})
    return order


def fetch_order(order_id: str) -> dict:
    """The order as Razorpay stored it, including the notes set at creation."""
    return get_client().order.fetch(order_id)


def fetch_payment(payment_id: str) -> dict:
    return get_client().payment.fetch(payment_id)


def _hmac_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment_signature(
    razorpay_order_id: str,
    razorpay_payment_id: str,
    razorpay_signature: str,
) -> bool:
    """
    Verify Razorpay payment signature using HMAC-SHA256.

    The signature is computed as:
        HMAC-SHA256(key=razorpay_secret, msg="{order_id}|{payment_id}")

    Uses hmac.compare_digest for timing-safe comparison.
    """
    if not settings.razorpay_key_secret:
        logger.warning("Razorpay key secret not configured")
        return False

    message = f"{razorpay_order_id}|{razorpay_payment_id}".encode("utf-8")
    expected_signature = _hmac_hex(settings.razorpay_key_secret, message)

    if hmac.compare_digest(expected_signature, razorpay_signature):
        return True

    logger.warning(
        "Razorpay payment signature mismatch",
        extra={"event": "security", "order_id": razorpay_order_id, "payment_id": razorpay_payment_id},
    )
    return False


def verify_webhook_signature(body: bytes, signature: Optional[str]) -> bool:
    """HMAC-SHA256 of the raw request body with RAZORPAY_WEBHOOK_SECRET."""
    if not settings.razorpay_webhook_secret:
        logger.warning("Razorpay webhook secret not configured")
        return False
    if not signature:
        return False

    expected_signature = _hmac_hex(settings.razorpay_webhook_secret, body)
    if hmac.compare_digest(expected_signature, signature):
        return True

    logger.warning("Razorpay webhook signature mismatch", extra={"event": "security"})
    return False
