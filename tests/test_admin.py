"""
Admin panel.

Covers:
  - admin-only access
  - property approval / rejection (status, owner email, notification, audit log)
  - user management and self-protection
  - membership plans and request review
  - newsletter subscribers and sending
  - enquiries inbox and transactions
  - featured agents and builders
"""
import uuid
from unittest.mock import AsyncMock, patch

import pytest

from app.models.audit_log import AuditLog
from app.models.inquiry import ContactMessage
from app.models.membership import Membership, MembershipPlan, MembershipRequest
from app.models.newsletter import NewsletterSubscription
from app.models.notification import Notification
from app.models.transaction import Transaction
from app.models.user import User
from app.services.membership_service import activate_membership
from tests.conftest import auth_headers


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def plan(db):
    plan = MembershipPlan(name="Gold", price=999, duration=30, featured_listings=5)
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


class TestAccess:
    @pytest.mark.parametrize("path", ["/admin/dashboard", "/admin/users", "/admin/audit-logs", "/admin/faqs"])
    def test_non_admin_forbidden(self, client, user, path):
        response = client.get(path, headers=auth_headers(user))
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_anonymous_unauthorised(self, client):
        assert client.get("/admin/dashboard").status_code == 401

    def test_dashboard_counts(self, client, user, make_user, make_property, admin_headers):
        make_user("agent1@example.com", user_type="AGENT")
        make_property(user, status="PENDING", title="Waiting for review")
        make_property(user, status="ACTIVE")

        data = client.get("/admin/dashboard", headers=admin_headers).json()
        assert data["total_properties"] == 2
        assert data["pending_properties"] == 1
        assert data["active_properties"] == 1
        assert data["total_agents"] == 1
        assert [p["title"] for p in data["recent_pending"]] == ["Waiting for review"]


class TestPropertyModeration:
    def test_approve(self, client, db, user, admin_user, admin_headers, make_property):
        prop = make_property(user, status="PENDING", title="Brand new listing")

        with patch("app.services.email_service.send_property_approved_email", new_callable=AsyncMock) as send:
            response = client.post(f"/admin/properties/{prop.id}/approve", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "ACTIVE"
        send.assert_called_once_with(user.email, user.name, "Brand new listing")

        notification = db.query(Notification).filter(Notification.user_id == user.id).one()
        assert notification.type == "property_approved"

        log = db.query(AuditLog).one()
        assert log.action == "APPROVE_PROPERTY"
        assert log.admin_id == admin_user.id
        assert log.target_id == str(prop.id)

        # now searchable
        assert client.get("/properties").json()["pagination"]["total"] == 1

    def test_reject_with_reason(self, client, db, user, admin_headers, make_property):
        prop = make_property(user, status="PENDING")

        with patch("app.services.email_service.send_property_rejected_email", new_callable=AsyncMock) as send:
            response = client.post(
                f"/admin/properties/{prop.id}/reject",
                json={"reason": "Photos are missing"},
                headers=admin_headers,
            )

        assert response.json()["status"] == "REJECTED"
        send.assert_called_once()
        notification = db.query(Notification).filter(Notification.user_id == user.id).one()
        assert "Photos are missing" in notification.message

    def test_filter_by_status(self, client, user, admin_headers, make_property):
        make_property(user, status="PENDING")
        make_property(user, status="ACTIVE")
        data = client.get("/admin/properties", params={"status": "PENDING"}, headers=admin_headers).json()
        assert data["total"] == 1

    def test_set_tier(self, client, user, admin_headers, make_property):
        prop = make_property(user)
        response = client.patch(
            f"/admin/properties/{prop.id}", json={"listing_tier": "PREMIUM"}, headers=admin_headers
        )
        assert response.json()["listing_tier"] == "PREMIUM"

    def test_unknown_property(self, client, admin_headers):
        response = client.post(f"/admin/properties/{uuid.uuid4()}/approve", headers=admin_headers)
        assert response.status_code == 404


class TestUsers:
    def test_search(self, client, user, other_user, admin_headers):
        data = client.get("/admin/users", params={"search": "olivia"}, headers=admin_headers).json()
        assert [u["email"] for u in data["users"]] == [user.email]

    def test_filter_by_type(self, client, admin_headers, make_user):
        make_user("b1@example.com", user_type="BUILDER")
        data = client.get("/admin/users", params={"user_type": "BUILDER"}, headers=admin_headers).json()
        assert data["total"] == 1

    def test_deactivate_user(self, client, db, user, admin_headers):
        response = client.patch(f"/admin/users/{user.id}", json={"is_active": False}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["is_active"] is False
        assert client.get("/users/me", headers=auth_headers(user)).status_code == 403
        assert db.query(AuditLog).filter(AuditLog.action == "UPDATE_USER").count() == 1

    def test_cannot_deactivate_self(self, client, admin_user, admin_headers):
        response = client.patch(f"/admin/users/{admin_user.id}", json={"is_active": False}, headers=admin_headers)
        assert response.status_code == 400

    def test_cannot_demote_self(self, client, admin_user, admin_headers):
        response = client.patch(
            f"/admin/users/{admin_user.id}", json={"user_type": "INDIVIDUAL"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_cannot_delete_self(self, client, admin_user, admin_headers):
        assert client.delete(f"/admin/users/{admin_user.id}", headers=admin_headers).status_code == 400

    def test_delete_user(self, client, db, other_user, admin_headers):
        user_id = other_user.id
        response = client.delete(f"/admin/users/{user_id}", headers=admin_headers)
        assert response.status_code == 200
        db.expire_all()
        assert db.query(User).filter(User.id == user_id).first() is None


class TestMembershipAdmin:
    def test_create_and_list_plans(self, client, admin_headers):
        response = client.post(
            "/admin/membership/plans",
            json={"name": "Platinum", "price": 2499, "duration": 90, "premium_listings": 10},
            headers=admin_headers,
        )
        assert response.status_code == 201

        public = client.get("/memberships/plans").json()
        assert [p["name"] for p in public] == ["Platinum"]

    def test_inactive_plan_hidden_from_public(self, client, plan, admin_headers):
        client.put(f"/admin/membership/plans/{plan.id}", json={"is_active": False}, headers=admin_headers)
        assert client.get("/memberships/plans").json() == []

    def test_delete_plan_with_members_conflicts(self, client, db, user, plan, admin_headers):
        activate_membership(db, user.id, plan)
        response = client.delete(f"/admin/membership/plans/{plan.id}", headers=admin_headers)
        assert response.status_code == 409

    def test_approve_request_activates_plan(self, client, db, user, plan, admin_headers):
        created = client.post(
            "/memberships/requests",
            json={"plan_id": str(plan.id), "reason": "Need more listings"},
            headers=auth_headers(user),
        )
        assert created.status_code == 201
        request_id = created.json()["id"]

        with patch("app.services.email_service.send_membership_activated_email", new_callable=AsyncMock):
            response = client.patch(
                f"/admin/membership/requests/{request_id}", json={"status": "APPROVED"}, headers=admin_headers
            )
        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"

        membership = db.query(Membership).filter(Membership.user_id == user.id).one()
        assert membership.status == "ACTIVE"
        assert membership.plan_id == plan.id

        mine = client.get("/memberships/me", headers=auth_headers(user)).json()
        assert mine["plan"]["name"] == "Gold"

    def test_reviewed_request_cannot_be_reviewed_again(self, client, db, user, plan, admin_headers):
        request = MembershipRequest(user_id=user.id, plan_id=plan.id, requested_plan=plan.name, status="REJECTED")
        db.add(request)
        db.commit()

        response = client.patch(
            f"/admin/membership/requests/{request.id}", json={"status": "APPROVED"}, headers=admin_headers
        )
        assert response.status_code == 409

    def test_reject_request_grants_nothing(self, client, db, user, plan, admin_headers):
        request = MembershipRequest(user_id=user.id, plan_id=plan.id, requested_plan=plan.name)
        db.add(request)
        db.commit()

        client.patch(f"/admin/membership/requests/{request.id}", json={"status": "REJECTED"}, headers=admin_headers)
        assert db.query(Membership).count() == 0


class TestNewsletterAdmin:
    def test_list_subscribers(self, client, db, admin_headers):
        db.add_all([
            NewsletterSubscription(email="a@example.com"),
            NewsletterSubscription(email="b@example.com", is_active=False),
        ])
        db.commit()

        data = client.get("/admin/newsletter", headers=admin_headers).json()
        assert data["total"] == 2
        assert data["active_count"] == 1

    def test_send_to_active_subscribers(self, client, db, admin_headers):
        db.add_all([
            NewsletterSubscription(email="a@example.com"),
            NewsletterSubscription(email="b@example.com"),
            NewsletterSubscription(email="c@example.com", is_active=False),
        ])
        db.commit()

        with patch("app.services.email_service.send_email", new_callable=AsyncMock, return_value=True) as send:
            response = client.post(
                "/admin/newsletter/send",
                json={"subject": "October picks", "content": "<p>New homes</p><script>x()</script>"},
                headers=admin_headers,
            )

        assert response.status_code == 200
        assert response.json()["sent"] == 2
        assert response.json()["failed"] == 0
        assert {c.args[0] for c in send.call_args_list} == {"a@example.com", "b@example.com"}
        assert all("<script" not in c.args[2] for c in send.call_args_list)
        assert db.query(AuditLog).filter(AuditLog.action == "SEND_NEWSLETTER").count() == 1

    def test_send_counts_failures(self, client, admin_headers):
        with patch("app.services.email_service.send_email", new_callable=AsyncMock, side_effect=[True, False]):
            response = client.post(
                "/admin/newsletter/send",
                json={"subject": "Hi", "content": "Body", "recipients": ["x@example.com", "y@example.com"]},
                headers=admin_headers,
            )
        assert response.json() == {"message": "Newsletter sent to 1 recipients", "sent": 1, "failed": 1}

    def test_no_recipients(self, client, admin_headers):
        response = client.post(
            "/admin/newsletter/send", json={"subject": "Hi", "content": "Body"}, headers=admin_headers
        )
        assert response.status_code == 400


class TestInboxAndTransactions:
    def test_enquiry_status(self, client, db, admin_headers):
        message = ContactMessage(name="Asha", email="asha@example.com", message="Please call me back.", status="NEW")
        db.add(message)
        db.commit()

        response = client.patch(f"/admin/enquiries/{message.id}", json={"status": "READ"}, headers=admin_headers)
        assert response.json()["status"] == "READ"
        assert client.get("/admin/enquiries", params={"status": "READ"}, headers=admin_headers).json()["total"] == 1

    def test_transaction_filters_and_update(self, client, db, user, admin_headers):
        db.add_all([
            Transaction(user_id=user.id, type="MEMBERSHIP", amount=999, status="COMPLETED"),
            Transaction(user_id=user.id, type="LISTING_UPGRADE", amount=499, status="FAILED"),
        ])
        db.commit()

        failed = client.get("/admin/transactions", params={"status": "FAILED"}, headers=admin_headers).json()
        assert failed["total"] == 1

        txn_id = failed["transactions"][0]["id"]
        response = client.patch(f"/admin/transactions/{txn_id}", json={"status": "REFUNDED"}, headers=admin_headers)
        assert response.json()["status"] == "REFUNDED"

    def test_audit_log_filter(self, client, user, admin_headers, make_property):
        prop = make_property(user, status="PENDING")
        client.post(f"/admin/properties/{prop.id}/approve", headers=admin_headers)
        client.patch(f"/admin/users/{user.id}", json={"is_verified": True}, headers=admin_headers)

        data = client.get("/admin/audit-logs", params={"action": "approve_property"}, headers=admin_headers).json()
        assert data["total"] == 1
        assert data["logs"][0]["target_type"] == "property"


class TestFeaturedDirectory:
    def test_feature_agent_and_builder(self, client, db, make_user, admin_headers):
        agent = make_user("agent1@example.com", user_type="AGENT", name="Anil Agent")
        builder = make_user("b1@example.com", user_type="BUILDER", name="Skyline")
        make_user("agent2@example.com", user_type="AGENT")

        response = client.patch(
            f"/admin/featured/agents/{agent.agent_profile.id}", json={"is_featured": True}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["is_featured"] is True
        client.patch(
            f"/admin/featured/builders/{builder.builder_profile.id}", json={"is_featured": True},
            headers=admin_headers,
        )

        data = client.get("/admin/featured", headers=admin_headers).json()
        assert data["stats"] == {
            "total_agents": 2, "featured_agents": 1, "total_builders": 1, "featured_builders": 1,
        }
        assert [a["user"]["name"] for a in data["agents"]] == ["Anil Agent"]
        assert [b["company_name"] for b in data["builders"]] == ["Skyline Developers"]

        actions = {log.action for log in db.query(AuditLog).all()}
        assert actions == {"FEATURE_AGENT", "FEATURE_BUILDER"}

    def test_unfeature(self, client, db, make_user, admin_headers):
        agent = make_user("agent1@example.com", user_type="AGENT")
        url = f"/admin/featured/agents/{agent.agent_profile.id}"
        client.patch(url, json={"is_featured": True}, headers=admin_headers)
        client.patch(url, json={"is_featured": False}, headers=admin_headers)

        assert client.get("/admin/featured", headers=admin_headers).json()["agents"] == []
        assert db.query(AuditLog).filter(AuditLog.action == "UNFEATURE_AGENT").count() == 1

    def test_unknown_builder(self, client, admin_headers):
        response = client.patch(
            f"/admin/featured/builders/{uuid.uuid4()}", json={"is_featured": True}, headers=admin_headers
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Builder not found"

    def test_public_directory_filter(self, client, make_user, admin_headers):
        agent = make_user("agent1@example.com", user_type="AGENT", name="Anil Agent")
        make_user("agent2@example.com", user_type="AGENT", name="Other Agent")
        client.patch(
            f"/admin/featured/agents/{agent.agent_profile.id}", json={"is_featured": True}, headers=admin_headers
        )

        data = client.get("/agents", params={"featured": True}).json()
        assert data["total"] == 1
        assert data["agents"][0]["user"]["name"] == "Anil Agent"
        assert client.get("/builders", params={"featured": True}).json()["total"] == 0
