"""Shared fixtures: an in-memory database recreated for every test."""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient

from kisaanmitra.db.init import init_db
from kisaanmitra.db.session import Base, SessionLocal, engine
from kisaanmitra.db.store import RowStore
from kisaanmitra.main import app

PROFILE = {
    "name": "Ramesh Patil",
    "location": "Nashik",
    "land_size": "2.5",
    "crop_type": "Onion",
    "phone": "9876543210",
    "address": "Ward 4, Pimpalgaon Baswant",
}


@pytest.fixture(autouse=True)
def tables():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return RowStore(db)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    """Register a user through the API and return auth headers for them."""
    def _register(username, password="secret123"):
        response = client.post("/auth/register", json={
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
            "full_name": username.title(),
        })
        assert response.status_code == 201, response.text
        token = response.json()["access_token"]
        return {"Authorization": f"Bearer {token}"}
    return _register


@pytest.fixture
def farmer_headers(client, register):
    """Register a user, save their profile and top up their credits."""
    def _farmer(username, credits=0, **profile):
        headers = register(username)
        response = client.put("/profiles/me", json={**PROFILE, **profile}, headers=headers)
        assert response.status_code == 200, response.text
        if credits:
            response = client.post("/credits/purchase", json={
                "amount": credits, "upi_id": f"{username}@upi", "payment_method": "upi",
            }, headers=headers)
            assert response.status_code == 200, response.text
        return headers
    return _farmer
