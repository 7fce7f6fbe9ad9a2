"""Tests for per-route rate limits."""
import pytest

from api import create_app
from api.extensions import get_storage

from conftest import PASSWORD, login, register


@pytest.fixture
def limited_app(tmp_path):
    app = create_app(
        "test",
        {
            "DATABASE_URL": f"sqlite:///{tmp_path / 'limited.db'}",
            "RATELIMIT_ENABLED": True,
            "RATELIMIT_STORAGE_URI": "memory://",
            "LOGIN_RATE_LIMIT": "2 per minute",
            "REGISTER_RATE_LIMIT": "1 per minute",
        },
    )
    yield app
    with app.app_context():
        get_storage().dispose()


def test_failed_logins_are_limited(limited_app):
    client = limited_app.test_client()

    assert login(client, password="Wr0ngPass").status_code == 401
    assert login(client, password="Wr0ngPass").status_code == 401
    resp = login(client, password="Wr0ngPass")

    assert resp.status_code == 429
    assert resp.get_json() == {"success": False, "message": "Too many login attempts. Try again in 15 minutes."}


def test_successful_logins_are_not_counted(limited_app):
    client = limited_app.test_client()
    assert register(client).status_code == 201

    for _ in range(3):
        assert login(client).status_code == 200


def test_register_limit(limited_app):
    client = limited_app.test_client()
    assert register(client).status_code == 201

    resp = register(client, email="bob@example.com", password=PASSWORD)

    assert resp.status_code == 429
    assert resp.get_json()["success"] is False
