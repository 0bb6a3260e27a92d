"""
Auth flow.

Covers:
  - register (profiles for agents and builders, duplicate email)
  - email verification with OTP
  - login, wrong password, deactivated account
  - token refresh
  - forgot / reset password
  - protected routes reject missing or refresh tokens
"""
from unittest.mock import patch

from app.core.security import create_refresh_token
from app.models.user import AgentProfile, BuilderProfile, User
from app.services import otp_service
from tests.conftest import DEFAULT_PASSWORD, auth_headers


def _register(client, **overrides):
    body = {"name": "Rahul Sharma", "email": "rahul@example.com", "password": "password123"}
    body.update(overrides)
    return client.post("/auth/register", json=body)


class TestRegister:
    def test_creates_unverified_user(self, client, db):
        response = _register(client)
        assert response.status_code == 201
        data = response.json()
        assert "user_id" in data

        user = db.query(User).filter(User.email == "rahul@example.com").first()
        assert user is not None
        assert user.is_verified is False
        assert user.user_type == "INDIVIDUAL"
        assert user.hashed_password != "password123"

    def test_email_is_normalised(self, client, db):
        _register(client, email="Rahul@Example.COM")
        assert db.query(User).filter(User.email == "rahul@example.com").count() == 1

    def test_duplicate_email(self, client):
        _register(client)
        response = _register(client, email="RAHUL@example.com")
        assert response.status_code == 409

    def test_agent_gets_profile(self, client, db):
        response = _register(client, email="agent@example.com", user_type="AGENT")
        user = db.query(User).filter(User.email == "agent@example.com").first()
        assert response.status_code == 201
        assert db.query(AgentProfile).filter(AgentProfile.user_id == user.id).count() == 1

    def test_builder_profile_uses_company_name(self, client, db):
        _register(client, email="builder@example.com", user_type="BUILDER", company_name="Skyline Estates")
        user = db.query(User).filter(User.email == "builder@example.com").first()
        profile = db.query(BuilderProfile).filter(BuilderProfile.user_id == user.id).first()
        assert profile.company_name == "Skyline Estates"

    def test_invalid_body(self, client):
        assert _register(client, password="short").status_code == 422


class TestVerifyEmail:
    def test_correct_otp_verifies(self, client, db):
        with patch.object(otp_service, "generate_otp", return_value="424242"):
            _register(client)

        response = client.post("/auth/verify-email", json={"email": "rahul@example.com", "otp": "424242"})
        assert response.status_code == 200

        user = db.query(User).filter(User.email == "rahul@example.com").first()
        assert user.is_verified is True

    def test_wrong_otp(self, client):
        with patch.object(otp_service, "generate_otp", return_value="424242"):
            _register(client)

        response = client.post("/auth/verify-email", json={"email": "rahul@example.com", "otp": "000000"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid or expired OTP"

    def test_otp_is_single_use(self, client):
        with patch.object(otp_service, "generate_otp", return_value="424242"):
            _register(client)

        body = {"email": "rahul@example.com", "otp": "424242"}
        assert client.post("/auth/verify-email", json=body).status_code == 200
        assert client.post("/auth/verify-email", json=body).status_code == 400

    def test_new_otp_invalidates_previous(self, db, user):
        first = otp_service.create_otp_record(db, user.email, "verify_email", user.id)
        otp_service.create_otp_record(db, user.email, "verify_email", user.id)
        assert otp_service.verify_otp_record(db, user.email, first, "verify_email") is False


class TestLogin:
    def test_returns_tokens_and_user(self, client, user):
        response = client.post("/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["user"]["email"] == user.email

    def test_records_last_login(self, client, db, user):
        client.post("/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
        db.expire_all()
        assert db.get(User, user.id).last_login_at is not None

    def test_wrong_password(self, client, user):
        response = client.post("/auth/login", json={"email": user.email, "password": "wrong-password"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_unknown_email_same_error(self, client):
        response = client.post("/auth/login", json={"email": "nobody@example.com", "password": "whatever1"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_deactivated_account(self, client, make_user):
        inactive = make_user("gone@example.com", is_active=False)
        response = client.post("/auth/login", json={"email": inactive.email, "password": DEFAULT_PASSWORD})
        assert response.status_code == 403

    def test_sixth_attempt_is_rate_limited(self, client, user):
        body = {"email": user.email, "password": "wrong-password"}
        for _ in range(5):
            assert client.post("/auth/login", json=body).status_code == 401
        assert client.post("/auth/login", json=body).status_code == 429


class TestRefresh:
    def test_rotates_tokens(self, client, user):
        response = client.post("/auth/refresh", json={"refresh_token": create_refresh_token(str(user.id))})
        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_access_token_is_not_a_refresh_token(self, client, user):
        access = auth_headers(user)["Authorization"].split(" ", 1)[1]
        response = client.post("/auth/refresh", json={"refresh_token": access})
        assert response.status_code == 401

    def test_garbage_token(self, client):
        assert client.post("/auth/refresh", json={"refresh_token": "abc"}).status_code == 401


class TestPasswordReset:
    def test_unknown_email_still_succeeds(self, client):
        response = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})
        assert response.status_code == 200

    def test_reset_with_otp(self, client, user):
        with patch.object(otp_service, "generate_otp", return_value="135790"):
            client.post("/auth/forgot-password", json={"email": user.email})

        response = client.post(
            "/auth/reset-password",
            json={
                "email": user.email,
                "otp": "135790",
                "new_password": "brand-new-pass",
                "confirm_password": "brand-new-pass",
            },
        )
        assert response.status_code == 200

        login = client.post("/auth/login", json={"email": user.email, "password": "brand-new-pass"})
        assert login.status_code == 200

    def test_reset_with_wrong_otp(self, client, user):
        client.post("/auth/forgot-password", json={"email": user.email})
        response = client.post(
            "/auth/reset-password",
            json={
                "email": user.email,
                "otp": "000001",
                "new_password": "brand-new-pass",
                "confirm_password": "brand-new-pass",
            },
        )
        assert response.status_code == 400


class TestProtectedRoutes:
    def test_missing_token(self, client):
        assert client.get("/users/me").status_code == 401

    def test_refresh_token_rejected_as_access(self, client, user):
        token = create_refresh_token(str(user.id))
        response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_deactivated_user_token_rejected(self, client, db, user):
        headers = auth_headers(user)
        user.is_active = False
        db.commit()
        assert client.get("/users/me", headers=headers).status_code == 403
