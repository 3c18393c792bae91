import os

# Must be set before the application modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("FIREBASE_PROJECT_ID", "test-project")

import pytest
from fastapi.testclient import TestClient

from laundry_affiliate.auth import get_current_user
from laundry_affiliate.database import Base, SessionLocal, engine
from laundry_affiliate.domain.scheduling.schemas import AvailabilitySchedule
from laundry_affiliate.main import app
from laundry_affiliate.models import Affiliate, User


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def affiliate(db):
    affiliate = Affiliate(
        affiliate_id="AFF100001",
        first_name="Test",
        last_name="Affiliate",
        email="affiliate@example.com",
        availability_schedule=AvailabilitySchedule.default("America/Chicago").to_document(),
    )
    db.add(affiliate)
    db.commit()
    db.refresh(affiliate)
    return affiliate


def _make_user(db, **fields):
    user = User(**fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db, affiliate):
    return _make_user(
        db,
        firebase_uid="uid-owner",
        email="owner@example.com",
        role="affiliate",
        affiliate_id=affiliate.affiliate_id,
    )


@pytest.fixture
def customer(db):
    return _make_user(db, firebase_uid="uid-customer", email="customer@example.com", role="customer")


@pytest.fixture
def admin(db):
    return _make_user(db, firebase_uid="uid-admin", email="admin@example.com", role="admin")


@pytest.fixture
def client(db):
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Authenticate subsequent requests as the given user"""

    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: user

    return _login
