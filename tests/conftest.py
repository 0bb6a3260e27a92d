"""
Shared fixtures.

Environment variables are set before the app is imported so Settings picks
them up. Every test gets a fresh in-memory SQLite schema; StaticPool keeps
the single connection alive so the test session and request sessions see
the same database.
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-do-not-use-in-production")
os.environ["DATABASE_URI"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models
from app.core.rate_limiter import limiter, rate_limit_store
from app.core.security import create_access_token, hash_password
from app.database import Base, get_db
from app.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "password123"


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    rate_limit_store.reset()
    limiter.reset()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


# ── Factories ─────────────────────────────────────────────────────────────────

def auth_headers(user) -> dict:
    token = create_access_token(str(user.id), user.user_type)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db):
    def _make(email: str, user_type: str = "INDIVIDUAL", name: str = "Test User", **fields):
        user = models.User(
            name=name,
            email=email,
            hashed_password=hash_password(fields.pop("password", DEFAULT_PASSWORD)),
            user_type=user_type,
            is_verified=fields.pop("is_verified", True),
            **fields,
        )
        db.add(user)
        db.flush()
        if user_type == "AGENT":
            db.add(models.AgentProfile(user_id=user.id, city="Mumbai", agency_name="Prime Homes"))
        elif user_type == "BUILDER":
            db.add(models.BuilderProfile(user_id=user.id, company_name=f"{name} Developers", city="Pune"))
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def user(make_user):
    return make_user("owner@example.com", name="Olivia Owner")


@pytest.fixture
def other_user(make_user):
    return make_user("buyer@example.com", name="Ben Buyer")


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@example.com", user_type="ADMIN", name="Ada Admin")


@pytest.fixture
def make_property(db):
    def _make(owner, **fields):
        values = {
            "title": "Sea view apartment",
            "property_type": "APARTMENT",
            "listing_type": "SELL",
            "address": "12 Carter Road",
            "locality": "Bandra",
            "city": "Mumbai",
            "state": "Maharashtra",
            "price": 15000000,
            "bedrooms": 2,
            "status": "ACTIVE",
            "listing_tier": "BASIC",
            "views": 0,
        }
        values.update(fields)
        prop = models.Property(user_id=owner.id, **values)
        db.add(prop)
        db.commit()
        db.refresh(prop)
        return prop
    return _make
