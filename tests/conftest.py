"""Shared pytest fixtures: in-memory database, users, and authenticated clients."""
import os

# Must be set before app modules build settings and the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient

from app import models  # noqa: F401  (registers tables on Base.metadata)
from app.core.security import create_access_token, get_password_hash
from app.db.session import Base, SessionLocal, engine, get_db
from app.main import app
from app.models.organization import Organization
from app.models.user import User, UserRole


@pytest.fixture
def db_session():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def organization(db_session):
    org = Organization(name="Acme Projects")
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


def _make_user(db_session, email, role, org_id=None):
    user = User(
        email=email,
        hashed_password=get_password_hash("password123"),
        role=role,
        org_id=org_id,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    return _make_user(db_session, "admin@projectra.local", UserRole.PROJECTRA_ADMIN)


@pytest.fixture
def member_user(db_session, organization):
    return _make_user(db_session, "member@acme.test", UserRole.MEMBER, org_id=organization.id)


def auth_headers(user):
    token = create_access_token({"sub": user.email, "user_id": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def member_headers(member_user):
    return auth_headers(member_user)


@pytest.fixture
def client(db_session):
    """Test client sharing the test's database session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client, admin_headers):
    client.headers.update(admin_headers)
    return client


@pytest.fixture
def feature_data():
    """Sample create payload."""
    return {
        "name": "video_call",
        "display_name": "Video Calls",
        "description": "In-app video meetings for project teams",
        "category": "collaboration",
        "is_premium": True,
        "pricing": {"monthly": 9, "yearly": 90},
    }
