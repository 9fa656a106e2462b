import os
import tempfile

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="qrmenu-uploads-")
os.environ["FRONTEND_URL"] = "https://menu.example.org"

from datetime import datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app import app
from database import db, get_db, reset_db
from database.models import SubscriptionStatus
from services.auth import AuthService


@pytest.fixture
def db_session():
    reset_db()
    session = db.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_restaurant(db_session):
    """Register a restaurant and force its ledger fields. Returns (restaurant, token)."""
    counter = {"n": 0}

    def _make(
        status: SubscriptionStatus = SubscriptionStatus.active,
        expiry: Optional[datetime] = None,
        customer_id: Optional[str] = None,
        name: str = "Cafe Aroma",
    ):
        counter["n"] += 1
        _, restaurant, token = AuthService(db_session).register(
            restaurant_name=name,
            email=f"owner{counter['n']}@cafe-aroma.in",
            password="secret123",
        )
        restaurant.subscription_status = SubscriptionStatus(status).value
        restaurant.subscription_expiry = expiry
        restaurant.stripe_customer_id = customer_id
        db_session.commit()
        return restaurant, token

    return _make
