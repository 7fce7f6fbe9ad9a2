"""Tests for contact form submission and listing."""
import pytest

VALID = {
    "full_name": "  Juan Perez ",
    "email": "juan.perez@email.com",
    "phone": "+1234567890",
    "message": "I would like a quote.",
}


def test_submit_stores_trimmed_values(client):
    resp = client.post("/api/forms", json=VALID)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["full_name"] == "Juan Perez"
    assert body["data"]["id"] >= 1
    assert body["timestamp"].endswith("Z")
    assert body["data"]["submitted_at"].endswith("Z")


@pytest.mark.parametrize("field", ["full_name", "email", "phone", "message"])
def test_blank_field_is_reported(client, field):
    resp = client.post("/api/forms", json={**VALID, field: "   "})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["message"] == "Invalid input data"
    assert len(body["errors"]) == 1 and body["errors"][0].startswith(f"{field}:")


def test_all_missing_fields_reported_together(client):
    resp = client.post("/api/forms", json={})

    assert resp.status_code == 400
    assert len(resp.get_json()["errors"]) == 4


def test_bad_email_format(client):
    resp = client.post("/api/forms", json={**VALID, "email": "juan@nowhere"})

    assert resp.status_code == 400
    assert resp.get_json()["errors"] == ["email: Email format is not valid."]


def test_list_newest_first(client):
    client.post("/api/forms", json={**VALID, "message": "first"})
    client.post("/api/forms", json={**VALID, "message": "second"})

    resp = client.get("/api/forms")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["total"] == 2
    assert [f["message"] for f in body["data"]] == ["second", "first"]
