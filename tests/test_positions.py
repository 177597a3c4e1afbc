"""Tests for the open position registry."""

from db import session_scope
from positions import consume_slot, find_match

POSITION = {
    "institution": "Dinas Kesehatan",
    "unit": "Puskesmas Gambir",
    "position": "Dokter Umum",
    "quota": 2,
    "requirements": "S1 Kedokteran, STR aktif",
}


def _create(client, headers, **overrides) -> dict:
    r = client.post("/positions", headers=headers, json={**POSITION, **overrides})
    assert r.status_code == 201, r.text
    return r.json()


def test_create_and_get(client, admin_headers):
    created = _create(client, admin_headers)
    assert created["is_active"] is True
    r = client.get(f"/positions/{created['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["requirements"] == POSITION["requirements"]


def test_create_requires_positive_quota(client, admin_headers):
    r = client.post("/positions", headers=admin_headers, json={**POSITION, "quota": 0})
    assert r.status_code == 422


def test_quota_cannot_go_negative(client, admin_headers):
    created = _create(client, admin_headers)
    r = client.patch(f"/positions/{created['id']}", headers=admin_headers, json={"quota": -1})
    assert r.status_code == 422


def test_open_list_hides_inactive_and_full(client, admin_headers, employee_user):
    _, headers = employee_user
    open_one = _create(client, admin_headers)
    full = _create(client, admin_headers, unit="Puskesmas Tanah Abang")
    closed = _create(client, admin_headers, unit="Puskesmas Menteng")
    client.patch(f"/positions/{full['id']}", headers=admin_headers, json={"quota": 0})
    r = client.post(f"/positions/{closed['id']}/deactivate", headers=admin_headers)
    assert r.json()["is_active"] is False

    r = client.get("/positions", headers=headers)
    assert r.status_code == 200
    assert [p["id"] for p in r.json()] == [open_one["id"]]

    r = client.get("/positions/all", headers=admin_headers)
    assert len(r.json()) == 3


def test_registry_changes_are_admin_only(client, admin_headers, employee_user):
    _, headers = employee_user
    created = _create(client, admin_headers)
    assert client.post("/positions", headers=headers, json=POSITION).status_code == 403
    assert client.patch(f"/positions/{created['id']}", headers=headers, json={"quota": 9}).status_code == 403
    assert client.get("/positions/all", headers=headers).status_code == 403


def test_missing_position(client, admin_headers):
    assert client.get("/positions/999", headers=admin_headers).status_code == 404
    assert client.post("/positions/999/deactivate", headers=admin_headers).status_code == 404


def test_find_match_ignores_inactive(client, admin_headers):
    created = _create(client, admin_headers)
    with session_scope() as session:
        assert find_match(session, "Dinas Kesehatan", "Puskesmas Gambir", "Dokter Umum").id == created["id"]
        assert find_match(session, "Dinas Kesehatan", "Puskesmas Gambir", "Bidan") is None

    client.post(f"/positions/{created['id']}/deactivate", headers=admin_headers)
    with session_scope() as session:
        assert find_match(session, "Dinas Kesehatan", "Puskesmas Gambir", "Dokter Umum") is None


def test_consume_slot_stops_at_zero(client, admin_headers):
    created = _create(client, admin_headers, quota=1)
    with session_scope() as session:
        assert consume_slot(session, created["id"]) is True
        assert consume_slot(session, created["id"]) is False
    assert client.get(f"/positions/{created['id']}", headers=admin_headers).json()["quota"] == 0
