"""pytest fixtures: in-memory SQLite database, seeded catalog/user, HTTP client."""

import os

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["CSRF_ENABLED"] = "false"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"

import pytest
from fastapi.testclient import TestClient

from config.database import Base, engine, SessionLocal
from common.session_store import session_store
from modules.ingredient.service import ingredient_service
from modules.user.models import ROLE_USER
from modules.user.service import user_service
import modules.taco.models  # noqa: F401
import modules.order.models  # noqa: F401

TEST_USERNAME = "habuma"
TEST_PASSWORD = "password"


@pytest.fixture
def db():
    """Fresh schema per test with the default ingredients and one user."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    ingredient_service.seed_defaults(session)
    user_service.create_user(
        session, TEST_USERNAME, TEST_PASSWORD, roles={ROLE_USER},
        fullname="Craig Walls", street="1234 Culinary Blvd.",
        city="Plano", state="TX", zip="76227", phone_number="123-123-1234",
    )
    session.commit()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        session_store.clear()


@pytest.fixture
def user(db):
    return user_service.find_by_username(db, TEST_USERNAME)


@pytest.fixture
def client(db):
    """HTTP client against the app. Lifespan (scheduler) is not started."""
    from main import app
    return TestClient(app)


@pytest.fixture
def logged_in_client(client):
    response = client.post(
        "/login",
        data={"username": TEST_USERNAME, "password": TEST_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 302
    return client
