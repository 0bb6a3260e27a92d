"""
Account endpoints and the owner dashboard.
"""
from unittest.mock import patch

import pytest

from app.models.inquiry import Inquiry
from app.models.property import Favorite
from app.routers.users import inquiries_trend
from app.services.notification_service import create_notification
from tests.conftest import DEFAULT_PASSWORD, auth_headers


class TestProfile:
    def test_me(self, client, user):
        data = client.get("/users/me", headers=auth_headers(user)).json()
        assert data["email"] == user.email
        assert "hashed_password" not in data

    def test_update(self, client, user):
        response = client.put(
            "/users/me", json={"name": "Olivia O.", "phone": "+91 98765 43210"}, headers=auth_headers(user)
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Olivia O."

    def test_null_name_is_ignored(self, client, user):
        response = client.put("/users/me", json={"name": None}, headers=auth_headers(user))
        assert response.json()["name"] == "Olivia Owner"

    def test_change_password(self, client, user):
        response = client.put(
            "/users/me/password",
            json={
                "current_password": DEFAULT_PASSWORD,
                "new_password": "another-pass-1",
                "confirm_password": "another-pass-1",
            },
            headers=auth_headers(user),
        )
        assert response.status_code == 200
        login = client.post("/auth/login", json={"email": user.email, "password": "another-pass-1"})
        assert login.status_code == 200

    def test_change_password_wrong_current(self, client, user):
        response = client.put(
            "/users/me/password",
            json={
                "current_password": "not-my-password",
                "new_password": "another-pass-1",
                "confirm_password": "another-pass-1",
            },
            headers=auth_headers(user),
        )
        assert response.status_code == 400


class TestAvatar:
    def test_rejects_non_images(self, client, user):
        response = client.post(
            "/users/me/avatar",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers(user),
        )
        assert response.status_code == 415

    def test_unconfigured_storage(self, client, user):
        response = client.post(
            "/users/me/avatar",
            files={"file": ("me.png", b"\x89PNG fake", "image/png")},
            headers=auth_headers(user),
        )
        assert response.status_code == 503

    def test_upload_sets_avatar(self, client, user):
        with patch("app.routers.users.upload_avatar", return_value="https://res.cloudinary.com/x/me.png") as upload:
            response = client.post(
                "/users/me/avatar",
                files={"file": ("me.png", b"\x89PNG fake", "image/png")},
                headers=auth_headers(user),
            )
        assert response.status_code == 200
        assert response.json()["avatar_url"] == "https://res.cloudinary.com/x/me.png"
        assert upload.call_args.args[1] == str(user.id)
        assert client.get("/users/me", headers=auth_headers(user)).json()["avatar_url"].endswith("me.png")


class TestUpload:
    def test_generic_upload(self, client, user):
        with patch("app.routers.upload.upload_image", return_value="https://cdn.test/p.jpg") as upload:
            response = client.post(
                "/upload",
                files={"file": ("p.jpg", b"jpegdata", "image/jpeg")},
                data={"folder": "properties"},
                headers=auth_headers(user),
            )
        assert response.json() == {"url": "https://cdn.test/p.jpg"}
        assert upload.call_args.kwargs["folder"] == "properties"

    def test_unknown_folder(self, client, user):
        response = client.post(
            "/upload",
            files={"file": ("p.jpg", b"jpegdata", "image/jpeg")},
            data={"folder": "secrets"},
            headers=auth_headers(user),
        )
        assert response.status_code == 422

    def test_empty_file(self, client, user):
        response = client.post(
            "/upload", files={"file": ("p.jpg", b"", "image/jpeg")}, headers=auth_headers(user)
        )
        assert response.status_code == 400


class TestInquiriesTrend:
    @pytest.mark.parametrize(
        "this_week,last_week,expected",
        [(0, 0, 0), (4, 0, 100), (6, 4, 50), (2, 4, -50), (1, 3, -67)],
    )
    def test_values(self, this_week, last_week, expected):
        assert inquiries_trend(this_week, last_week) == expected


class TestDashboard:
    def test_stats(self, client, db, user, other_user, make_property):
        live = make_property(user, title="Live one", views=10)
        make_property(user, title="Pending one", status="PENDING", views=2)
        make_property(other_user, title="Not mine", views=100)

        db.add_all([
            Inquiry(receiver_id=user.id, property_id=live.id, name="Ben", email="ben@example.com",
                    message="Interested in a visit.", status="PENDING"),
            Inquiry(receiver_id=user.id, property_id=live.id, name="Cara", email="cara@example.com",
                    message="Is the price negotiable?", status="PENDING"),
            Favorite(user_id=other_user.id, property_id=live.id),
        ])
        db.commit()
        create_notification(db, user.id, "system", "Welcome", "Thanks for joining")

        data = client.get("/users/dashboard", headers=auth_headers(user)).json()
        stats = data["stats"]
        assert stats["total_properties"] == 2
        assert stats["active_listings"] == 1
        assert stats["total_views"] == 12
        assert stats["total_inquiries"] == 2
        assert stats["total_favorites"] == 1
        assert stats["inquiries_trend"] == 100

        counts = {p["title"]: p["inquiries"] for p in data["recent_properties"]}
        assert counts == {"Live one": 2, "Pending one": 0}
        assert len(data["recent_inquiries"]) == 2
        assert data["recent_inquiries"][0]["property_title"] == "Live one"
        assert [n["title"] for n in data["notifications"]] == ["Welcome"]

    def test_empty_dashboard(self, client, user):
        stats = client.get("/users/dashboard", headers=auth_headers(user)).json()["stats"]
        assert stats == {
            "total_properties": 0,
            "active_listings": 0,
            "total_views": 0,
            "total_inquiries": 0,
            "total_favorites": 0,
            "inquiries_trend": 0,
        }
