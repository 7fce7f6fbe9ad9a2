"""Tests for the admin-only seed routes."""
from unittest.mock import patch

from conftest import bearer, login


def test_run_generates_users_forms_and_tokens(client, admin):
    resp = client.post(
        "/api/seed/run",
        json={"user_count": 8, "form_count": 6},
        headers=bearer(admin["access_token"]),
    )

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["tables_created"] is True
    assert data["data_cleared"] is False
    assert data["users_created"] == 8
    assert data["forms_created"] == 6
    assert 1 <= data["tokens_created"] <= 5
    assert login(client, "admin@test.com", "Password123").status_code == 200


def test_refresh_tokens_go_to_first_sixty_percent_of_active_users(client, admin):
    with patch("utils.seed.random.random", return_value=0.5):
        resp = client.post(
            "/api/seed/run",
            json={"user_count": 10, "form_count": 0},
            headers=bearer(admin["access_token"]),
        )

    assert resp.get_json()["data"]["tokens_created"] == 6


def test_run_skips_users_that_already_exist(client, admin):
    headers = bearer(admin["access_token"])
    client.post("/api/seed/run", json={"user_count": 5, "form_count": 0}, headers=headers)

    resp = client.post("/api/seed/run", json={"user_count": 5, "form_count": 0}, headers=headers)

    assert resp.status_code == 200
    assert resp.get_json()["data"]["users_created"] == 0


def test_status_counts(client, admin, alice):
    client.post("/api/forms", json={"full_name": "A", "email": "a@b.co", "phone": "1", "message": "hi"})
    client.post("/api/auth/logout-all", headers=bearer(alice["access_token"]))

    resp = client.get("/api/seed/status", headers=bearer(admin["access_token"]))

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["tables"] == {"users": 2, "contact_forms": 1, "refresh_tokens": 1}
    assert data["users_by_role"] == {"admin": 1, "user": 1}
    assert data["users_by_status"] == {"active": 2, "inactive": 0}


def test_clear_deletes_everything(client, admin, alice):
    resp = client.delete("/api/seed/clear", headers=bearer(admin["access_token"]))

    assert resp.status_code == 200
    assert resp.get_json()["data"] == {"refresh_tokens_deleted": 2, "forms_deleted": 0, "users_deleted": 2}
    # The caller's own account is gone, so its token no longer resolves
    assert client.get("/api/auth/profile", headers=bearer(admin["access_token"])).status_code == 401


def test_create_tables_is_idempotent(client, admin):
    for _ in range(2):
        resp = client.post("/api/seed/create-tables", headers=bearer(admin["access_token"]))
        assert resp.status_code == 200
    assert set(resp.get_json()["data"]["tables"]) == {"users", "refresh_tokens", "contact_forms"}


def test_seed_routes_are_admin_only(client, alice):
    headers = bearer(alice["access_token"])

    assert client.post("/api/seed/run", json={}, headers=headers).status_code == 403
    assert client.delete("/api/seed/clear", headers=headers).status_code == 403
    assert client.get("/api/seed/status", headers=headers).status_code == 403
    assert client.post("/api/seed/create-tables", headers=headers).status_code == 403


def test_invalid_counts(client, admin):
    resp = client.post("/api/seed/run", json={"user_count": -1}, headers=bearer(admin["access_token"]))

    assert resp.status_code == 400
    assert resp.get_json()["errors"][0].startswith("user_count:")
