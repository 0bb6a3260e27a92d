"""
Inquiries and the public contact form.

Covers:
  - anonymous and logged-in inquiries
  - receiver gets an email and an in-app notification
  - sent/received listing and status updates
  - contact form storage and admin copy
"""
import uuid
from unittest.mock import AsyncMock, patch

from app.models.inquiry import ContactMessage, Inquiry
from app.models.notification import Notification
from tests.conftest import auth_headers


def _inquiry(receiver, prop=None, **overrides):
    body = {
        "receiver_id": str(receiver.id),
        "name": "Ben Buyer",
        "email": "ben@example.com",
        "phone": "9876543210",
        "message": "Is this flat still available for a visit this weekend?",
    }
    if prop is not None:
        body["property_id"] = str(prop.id)
    body.update(overrides)
    return body


class TestCreateInquiry:
    def test_anonymous_inquiry(self, client, db, user, make_property):
        prop = make_property(user, title="Lake facing 3BHK")
        with patch("app.routers.inquiries.send_inquiry_email", new_callable=AsyncMock) as send:
            response = client.post("/inquiries", json=_inquiry(user, prop))

        assert response.status_code == 201
        data = response.json()
        assert data["sender_id"] is None
        assert data["status"] == "PENDING"
        assert data["property_title"] == "Lake facing 3BHK"

        send.assert_called_once()
        assert send.call_args.args[0] == user.email

        notification = db.query(Notification).filter(Notification.user_id == user.id).one()
        assert notification.type == "inquiry"
        assert notification.extra["inquiry_id"] == data["id"]

    def test_logged_in_sender_is_recorded(self, client, user, other_user):
        response = client.post("/inquiries", json=_inquiry(user), headers=auth_headers(other_user))
        assert response.json()["sender_id"] == str(other_user.id)

    def test_invalid_token_falls_back_to_anonymous(self, client, user):
        response = client.post(
            "/inquiries", json=_inquiry(user), headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 201
        assert response.json()["sender_id"] is None

    def test_unknown_receiver(self, client, user):
        response = client.post("/inquiries", json=_inquiry(user, receiver_id=str(uuid.uuid4())))
        assert response.status_code == 404
        assert response.json()["detail"] == "Receiver not found"

    def test_unknown_property(self, client, user):
        response = client.post("/inquiries", json=_inquiry(user, property_id=str(uuid.uuid4())))
        assert response.status_code == 404

    def test_short_message(self, client, user):
        assert client.post("/inquiries", json=_inquiry(user, message="hi")).status_code == 422


class TestListAndUpdate:
    def test_lists_sent_and_received(self, client, user, other_user, make_user):
        third = make_user("third@example.com")
        client.post("/inquiries", json=_inquiry(user), headers=auth_headers(other_user))
        client.post("/inquiries", json=_inquiry(other_user), headers=auth_headers(user))
        client.post("/inquiries", json=_inquiry(third))

        data = client.get("/inquiries", headers=auth_headers(user)).json()
        assert data["total"] == 2

    def test_receiver_updates_status(self, client, user):
        created = client.post("/inquiries", json=_inquiry(user)).json()
        response = client.patch(
            f"/inquiries/{created['id']}", json={"status": "RESPONDED"}, headers=auth_headers(user)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "RESPONDED"

    def test_sender_cannot_update(self, client, user, other_user):
        created = client.post("/inquiries", json=_inquiry(user), headers=auth_headers(other_user)).json()
        response = client.patch(
            f"/inquiries/{created['id']}", json={"status": "CLOSED"}, headers=auth_headers(other_user)
        )
        assert response.status_code == 403

    def test_admin_can_update(self, client, user, admin_user):
        created = client.post("/inquiries", json=_inquiry(user)).json()
        response = client.patch(
            f"/inquiries/{created['id']}", json={"status": "CLOSED"}, headers=auth_headers(admin_user)
        )
        assert response.status_code == 200

    def test_invalid_status(self, client, db, user):
        created = client.post("/inquiries", json=_inquiry(user)).json()
        response = client.patch(
            f"/inquiries/{created['id']}", json={"status": "ARCHIVED"}, headers=auth_headers(user)
        )
        assert response.status_code == 422
        assert db.query(Inquiry).one().status == "PENDING"


class TestContactForm:
    BODY = {
        "name": "Meera",
        "email": "meera@example.com",
        "subject": "Partnership",
        "message": "We would like to list our new project with you.",
    }

    def test_stores_message_and_emails_admin(self, client, db):
        with patch("app.routers.contact.send_contact_form_email", new_callable=AsyncMock) as send:
            response = client.post("/contact", json=self.BODY)

        assert response.status_code == 201
        stored = db.query(ContactMessage).one()
        assert stored.status == "NEW"
        assert stored.subject == "Partnership"
        send.assert_called_once()

    def test_validation(self, client):
        assert client.post("/contact", json={**self.BODY, "email": "nope"}).status_code == 422
