"""Pytest configuration and shared fixtures."""

import pytest

from venue_booking import create_app
from venue_booking.database import db

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret-passw0rd"


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "APP_ENV": "test",
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_token(client) -> str:
    client.post("/api/auth/register", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    return response.get_json()["token"]


@pytest.fixture
def auth_headers(admin_token) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def venue_id(client, auth_headers) -> int:
    response = client.post(
        "/api/venues",
        json={"name": "Harbour Room", "location": "Pier 4", "capacity": 80, "amenities": ["bar"]},
        headers=auth_headers,
    )
    return response.get_json()["venue"]["id"]


@pytest.fixture
def table_type_id(client, auth_headers) -> int:
    response = client.post(
        "/api/table-types",
        json={"name": "Booth", "description": "Corner booth", "capacity": 4, "price": "25.50"},
        headers=auth_headers,
    )
    return response.get_json()["table_type"]["id"]


@pytest.fixture
def booking_payload(venue_id) -> dict:
    return {
        "venue_id": venue_id,
        "full_name": "A",
        "email": "a@b.com",
        "date": "2024-03-15",
        "time": "18:30",
    }


@pytest.fixture
def create_booking(client, booking_payload):
    def _create(**overrides):
        response = client.post("/api/bookings", json={**booking_payload, **overrides})
        assert response.status_code == 201, response.get_json()
        return response.get_json()["booking"]

    return _create
