"""
Pytest configuration and shared fixtures.

Every test gets its own application bound to a fresh SQLite file under
tmp_path, so tests never share rows.
"""
from datetime import timedelta

import pytest

from api import create_app
from api.extensions import get_storage
from models.refresh_token import RefreshToken
from models.user import Role, User
from utils.security import create_access_token, hash_password, token_payload

PASSWORD = "Passw0rd"
ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
def app(tmp_path):
    app = create_app("test", {"DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}"})
    yield app
    with app.app_context():
        get_storage().dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def refresh_rows(app, user_id: int) -> list[dict]:
    """Snapshot of a user's stored refresh tokens, read in a fresh session."""
    with app.app_context():
        session = get_storage().get_session()
        rows = session.query(RefreshToken).filter(RefreshToken.user_id == user_id).all()
        return [{"token_hash": r.token_hash, "revoked": r.revoked, "expires_at": r.expires_at} for r in rows]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, email="alice@example.com", password=PASSWORD, name="Alice"):
    return client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "confirm_password": password},
    )


def login(client, email="alice@example.com", password=PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def make_user(app, email, role=Role.USER, is_active=True, password=PASSWORD, name="Test User") -> int:
    with app.app_context():
        storage = get_storage()
        user = User(name=name, email=email, password_hash=hash_password(password), role=role, is_active=is_active)
        storage.new(user)
        storage.save()
        return user.id


def access_token_for(app, user_id: int, expires_delta: timedelta | None = None) -> str:
    with app.app_context():
        user = get_storage().get(User, user_id)
        return create_access_token(token_payload(user), expires_delta=expires_delta)


@pytest.fixture
def alice(client):
    """A registered user: {"id", "access_token", "refresh_token"}."""
    resp = register(client)
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    return {"id": data["user"]["id"], "access_token": data["access_token"], "refresh_token": data["refresh_token"]}


@pytest.fixture
def admin(app, client):
    user_id = make_user(app, ADMIN_EMAIL, role=Role.ADMIN, name="Admin")
    resp = login(client, ADMIN_EMAIL)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    return {"id": user_id, "access_token": data["access_token"], "refresh_token": data["refresh_token"]}
