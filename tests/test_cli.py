"""Tests for the flask maintenance commands."""
from datetime import timedelta

from api.extensions import get_storage
from models.base_model import utcnow
from models.refresh_token import RefreshToken
from models.user import Role, User

from conftest import login, refresh_rows


def test_create_admin(app, client):
    result = app.test_cli_runner().invoke(args=["create-admin", "Jane Admin", "Jane@Example.com", "S3cretPass"])

    assert result.exit_code == 0, result.output
    assert "Created admin jane@example.com" in result.output
    with app.app_context():
        user = get_storage().get_session().query(User).filter(User.email == "jane@example.com").one()
        assert user.role == Role.ADMIN and user.is_active
    assert login(client, "jane@example.com", "S3cretPass").status_code == 200


def test_create_admin_duplicate_email(app):
    runner = app.test_cli_runner()
    runner.invoke(args=["create-admin", "Jane", "jane@example.com", "S3cretPass"])

    result = runner.invoke(args=["create-admin", "Jane", "jane@example.com", "S3cretPass"])

    assert result.exit_code != 0
    assert "Email already registered" in result.output


def test_cleanup_tokens(app, alice):
    with app.app_context():
        storage = get_storage()
        storage.get_session().query(RefreshToken).update(
            {RefreshToken.expires_at: utcnow() - timedelta(days=1)}, synchronize_session=False
        )
        storage.save()

    result = app.test_cli_runner().invoke(args=["cleanup-tokens"])

    assert result.exit_code == 0, result.output
    assert "Deleted 1 refresh token(s)" in result.output
    assert refresh_rows(app, alice["id"]) == []


def test_seed_db(app, client):
    result = app.test_cli_runner().invoke(args=["seed-db", "--user-count", "5", "--form-count", "3"])

    assert result.exit_code == 0, result.output
    assert "users_created: 5" in result.output
    assert "forms_created: 3" in result.output
    assert login(client, "admin@test.com", "Password123").status_code == 200
