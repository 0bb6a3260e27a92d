"""
Razorpay payments and webhooks.

The gateway client is never contacted: create_order / fetch_payment are
patched and signatures are computed locally with test secrets.

Covers:
  - order pricing from the plan, listing upgrades, missing target
  - signature verification (payment and webhook)
  - membership activation and listing tier upgrade on verify
  - the paid order, not the request body, decides what is granted
  - replaying a verified payment id
  - payment.captured / payment.failed webhooks
"""
import hashlib
import hmac
import json
from unittest.mock import patch

import pytest

from app.config import settings
from app.models.membership import Membership, MembershipPlan
from app.models.notification import Notification
from app.models.property import Property
from app.models.transaction import Transaction
from app.services import razorpay_service
from tests.conftest import auth_headers

KEY_SECRET = "rzp_test_secret"
WEBHOOK_SECRET = "rzp_webhook_secret"


def _sign(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


@pytest.fixture(autouse=True)
def razorpay_secrets():
    with patch.object(settings, "razorpay_key_id", "rzp_test_key"), \
            patch.object(settings, "razorpay_key_secret", KEY_SECRET), \
            patch.object(settings, "razorpay_webhook_secret", WEBHOOK_SECRET):
        yield


@pytest.fixture
def plan(db):
    plan = MembershipPlan(name="Gold", price=999, duration=30)
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


def _order_stub(**kwargs):
    return {"id": "order_abc123", "amount": razorpay_service.to_paise(kwargs["amount_inr"]), "currency": "INR"}


def _paid_order(owner, amount_paise: int, **notes):
    return {
        "id": "order_abc123",
        "amount": amount_paise,
        "currency": "INR",
        "notes": {"user_id": str(owner.id), **notes},
    }


class TestHelpers:
    def test_to_paise(self):
        assert razorpay_service.to_paise(999) == 99900
        assert razorpay_service.to_paise(10.5) == 1050

    def test_receipt_fits_razorpay_limit(self):
        assert len(razorpay_service.make_receipt("7f1c2e0a-0000-4000-8000-000000000000")) <= 40

    def test_payment_signature(self):
        sig = _sign(KEY_SECRET, b"order_1|pay_1")
        assert razorpay_service.verify_payment_signature("order_1", "pay_1", sig) is True
        assert razorpay_service.verify_payment_signature("order_1", "pay_2", sig) is False

    def test_payment_signature_without_secret(self):
        with patch.object(settings, "razorpay_key_secret", None):
            assert razorpay_service.verify_payment_signature("o", "p", "sig") is False

    def test_webhook_signature(self):
        body = b'{"event": "payment.captured"}'
        assert razorpay_service.verify_webhook_signature(body, _sign(WEBHOOK_SECRET, body)) is True
        assert razorpay_service.verify_webhook_signature(body, None) is False
        assert razorpay_service.verify_webhook_signature(body, "0" * 64) is False


class TestCreateOrder:
    def test_membership_priced_from_plan(self, client, user, plan):
        with patch.object(razorpay_service, "create_order", side_effect=_order_stub) as create:
            response = client.post(
                "/payments/razorpay/order",
                # a client-sent amount is ignored for memberships
                json={"type": "membership", "plan_id": str(plan.id), "amount": 1},
                headers=auth_headers(user),
            )

        assert response.status_code == 200
        data = response.json()
        assert data["order_id"] == "order_abc123"
        assert data["amount"] == 99900
        assert data["key_id"] == "rzp_test_key"
        assert data["prefill"]["email"] == user.email
        assert create.call_args.kwargs["amount_inr"] == 999
        assert create.call_args.kwargs["notes"]["plan_id"] == str(plan.id)

    def test_listing_upgrade(self, client, user, make_property):
        prop = make_property(user)
        with patch.object(razorpay_service, "create_order", side_effect=_order_stub):
            response = client.post(
                "/payments/razorpay/order",
                json={"type": "featured", "amount": 499, "property_id": str(prop.id)},
                headers=auth_headers(user),
            )
        assert response.status_code == 200
        assert response.json()["amount"] == 49900

    def test_upgrade_of_someone_elses_listing(self, client, user, other_user, make_property):
        prop = make_property(user)
        response = client.post(
            "/payments/razorpay/order",
            json={"type": "premium", "amount": 499, "property_id": str(prop.id)},
            headers=auth_headers(other_user),
        )
        assert response.status_code == 403

    def test_missing_plan_and_amount(self, client, user):
        response = client.post("/payments/razorpay/order", json={"type": "featured"}, headers=auth_headers(user))
        assert response.status_code == 400
        assert response.json()["detail"] == "Either plan_id or amount is required"

    def test_inactive_plan(self, client, db, user, plan):
        plan.is_active = False
        db.commit()
        response = client.post(
            "/payments/razorpay/order", json={"type": "membership", "plan_id": str(plan.id)},
            headers=auth_headers(user),
        )
        assert response.status_code == 404

    def test_gateway_not_configured(self, client, user, plan):
        razorpay_service.get_client.cache_clear()
        with patch.object(settings, "razorpay_key_id", None):
            response = client.post(
                "/payments/razorpay/order", json={"type": "membership", "plan_id": str(plan.id)},
                headers=auth_headers(user),
            )
        assert response.status_code == 503


class TestVerifyPayment:
    def _body(self, **overrides):
        body = {
            "razorpay_order_id": "order_abc123",
            "razorpay_payment_id": "pay_xyz789",
            "razorpay_signature": _sign(KEY_SECRET, b"order_abc123|pay_xyz789"),
        }
        body.update(overrides)
        return body

    def _verify(self, client, user, order: dict, paid_paise: int, **overrides):
        with patch.object(razorpay_service, "fetch_order", return_value=order), \
                patch.object(razorpay_service, "fetch_payment", return_value={"amount": paid_paise}):
            return client.post("/payments/razorpay/verify", json=self._body(**overrides), headers=auth_headers(user))

    def test_membership_activated(self, client, db, user, plan):
        order = _paid_order(user, 99900, type="membership", plan_id=str(plan.id))
        response = self._verify(client, user, order, 99900)

        assert response.status_code == 200
        assert response.json()["success"] is True

        transaction = db.query(Transaction).one()
        assert transaction.status == "COMPLETED"
        assert transaction.type == "MEMBERSHIP"
        assert transaction.amount == 999
        assert transaction.transaction_id == "pay_xyz789"

        membership = db.query(Membership).filter(Membership.user_id == user.id).one()
        assert membership.status == "ACTIVE"
        assert (membership.end_date - membership.start_date).days == 30

        types = [n.type for n in db.query(Notification).filter(Notification.user_id == user.id)]
        assert types == ["membership_activated"]

    def test_plan_comes_from_the_order(self, client, db, user, plan):
        platinum = MembershipPlan(name="Platinum", price=9999, duration=365)
        db.add(platinum)
        db.commit()

        order = _paid_order(user, 99900, type="membership", plan_id=str(plan.id))
        # client claims the expensive plan after paying for the cheap one
        response = self._verify(client, user, order, 99900, type="membership", plan_id=str(platinum.id))

        assert response.status_code == 200
        membership = db.query(Membership).filter(Membership.user_id == user.id).one()
        assert membership.plan_id == plan.id

    def test_listing_upgraded(self, client, db, user, make_property):
        prop = make_property(user)
        order = _paid_order(user, 49900, type="premium", property_id=str(prop.id))
        response = self._verify(client, user, order, 49900)

        assert response.status_code == 200
        db.expire_all()
        assert db.get(Property, prop.id).listing_tier == "PREMIUM"
        transaction = db.query(Transaction).one()
        assert transaction.type == "LISTING_UPGRADE"
        assert transaction.amount == 499

    def test_order_of_another_account(self, client, db, user, other_user, plan):
        order = _paid_order(other_user, 99900, type="membership", plan_id=str(plan.id))
        response = self._verify(client, user, order, 99900)

        assert response.status_code == 403
        assert db.query(Transaction).count() == 0
        assert db.query(Membership).count() == 0

    def test_order_without_notes(self, client, db, user):
        order = {"id": "order_abc123", "amount": 99900, "notes": []}
        response = self._verify(client, user, order, 99900)
        assert response.status_code == 403
        assert db.query(Transaction).count() == 0

    def test_order_without_purchase_type(self, client, db, user):
        order = {"id": "order_abc123", "amount": 99900, "notes": {"user_id": str(user.id)}}
        response = self._verify(client, user, order, 99900)
        assert response.status_code == 400
        assert response.json()["detail"] == "Order has no purchase attached"
        assert db.query(Transaction).count() == 0

    def test_invalid_signature(self, client, db, user, plan):
        response = client.post(
            "/payments/razorpay/verify",
            json=self._body(razorpay_signature="forged"),
            headers=auth_headers(user),
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Payment verification failed. Invalid signature."
        assert db.query(Transaction).count() == 0
        assert db.query(Membership).count() == 0

    def test_replay_returns_first_transaction(self, client, db, user, plan):
        order = _paid_order(user, 99900, type="membership", plan_id=str(plan.id))
        first = self._verify(client, user, order, 99900).json()
        second = self._verify(client, user, order, 99900).json()

        assert first["transaction_id"] == second["transaction_id"]
        assert db.query(Transaction).count() == 1


class TestWebhook:
    def _post(self, client, event: dict, secret: str = WEBHOOK_SECRET):
        body = json.dumps(event).encode()
        return client.post(
            "/webhooks/razorpay",
            content=body,
            headers={"Content-Type": "application/json", "X-Razorpay-Signature": _sign(secret, body)},
        )

    def test_bad_signature(self, client):
        response = self._post(client, {"event": "payment.captured"}, secret="wrong")
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid webhook signature"

    def test_non_object_payload(self, client):
        response = self._post(client, ["not", "an", "object"])
        assert response.status_code == 400

    def test_payment_failed_records_transaction(self, client, db, user):
        event = {
            "event": "payment.failed",
            "payload": {
                "payment": {
                    "entity": {
                        "id": "pay_failed_1",
                        "order_id": "order_1",
                        "amount": 49900,
                        "currency": "inr",
                        "error_description": "Card declined",
                        "notes": {"user_id": str(user.id), "type": "featured"},
                    }
                }
            },
        }
        response = self._post(client, event)
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

        transaction = db.query(Transaction).one()
        assert transaction.status == "FAILED"
        assert transaction.amount == 499
        assert transaction.currency == "INR"
        assert transaction.type == "LISTING_UPGRADE"
        assert db.query(Notification).filter(Notification.type == "payment_failed").count() == 1

    def test_payment_captured_completes_pending(self, client, db, user):
        db.add(Transaction(
            user_id=user.id, type="MEMBERSHIP", amount=999, status="PENDING", transaction_id="pay_cap_1",
        ))
        db.commit()

        event = {
            "event": "payment.captured",
            "payload": {"payment": {"entity": {"id": "pay_cap_1", "amount": 99900, "notes": {"user_id": str(user.id)}}}},
        }
        assert self._post(client, event).status_code == 200
        db.expire_all()
        assert db.query(Transaction).one().status == "COMPLETED"

    def test_unhandled_event_is_acknowledged(self, client):
        assert self._post(client, {"event": "order.paid", "payload": {}}).status_code == 200
