"""Tests for /employees endpoints."""

from datetime import date

from conftest import EMPLOYEE_DATA
from db import session_scope
from models import Account, JobHistoryRecord


def _payload(**overrides) -> dict:
    data = {**EMPLOYEE_DATA, "birth_date": EMPLOYEE_DATA["birth_date"].isoformat()}
    data.update(overrides)
    return data


def test_create_and_get_employee_with_full_address(client, admin_headers):
    r = client.post("/employees", headers=admin_headers, json=_payload())
    assert r.status_code == 201
    created = r.json()
    assert created["is_active"] is True

    r = client.get(f"/employees/{created['id']}", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    for field in ("province_id", "province_name", "city_id", "city_name",
                  "district_id", "district_name", "village_id", "village_name"):
        assert body[field] == EMPLOYEE_DATA[field]
    assert body["birth_date"] == "1985-01-01"
    assert body["education"] == "S1"


def test_duplicate_nip_rejected(client, admin_headers):
    assert client.post("/employees", headers=admin_headers, json=_payload()).status_code == 201
    r = client.post("/employees", headers=admin_headers, json=_payload(full_name="Someone Else"))
    assert r.status_code == 409
    assert r.json()["error"] == "duplicate_key"
    assert "nip" in r.json()["detail"]


def test_create_rejects_invalid_enum_and_blank_name(client, admin_headers):
    assert client.post("/employees", headers=admin_headers, json=_payload(education="S9")).status_code == 422
    assert client.post("/employees", headers=admin_headers, json=_payload(full_name="   ")).status_code == 422


def test_get_missing_employee(client, admin_headers):
    r = client.get("/employees/999", headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_list_requires_auth(client):
    assert client.get("/employees").status_code == 401


def test_patch_leaves_omitted_fields_alone(client, admin_headers, make_employee):
    employee = make_employee()
    r = client.patch(f"/employees/{employee.id}", headers=admin_headers, json={"phone": "0899"})
    assert r.status_code == 200
    assert r.json()["phone"] == "0899"
    assert r.json()["email"] == EMPLOYEE_DATA["email"]
    assert r.json()["full_name"] == EMPLOYEE_DATA["full_name"]


def test_patch_null_clears_optional_field(client, admin_headers, make_employee):
    employee = make_employee()
    r = client.patch(f"/employees/{employee.id}", headers=admin_headers, json={"email": None})
    assert r.status_code == 200
    assert r.json()["email"] is None


def test_patch_null_on_required_field_rejected(client, admin_headers, make_employee):
    employee = make_employee()
    r = client.patch(f"/employees/{employee.id}", headers=admin_headers, json={"full_name": None})
    assert r.status_code == 422
    r = client.get(f"/employees/{employee.id}", headers=admin_headers)
    assert r.json()["full_name"] == EMPLOYEE_DATA["full_name"]


def test_patch_to_duplicate_nip(client, admin_headers, make_employee):
    first = make_employee()
    second = make_employee()
    r = client.patch(f"/employees/{second.id}", headers=admin_headers, json={"nip": first.nip})
    assert r.status_code == 409


def test_list_filters_and_pagination(client, admin_headers, make_employee):
    make_employee(full_name="Andi", education="S2")
    make_employee(full_name="Bambang", education="S1", phone="0811111")
    make_employee(full_name="Citra", education="S2", is_active=False)

    r = client.get("/employees", headers=admin_headers)
    assert r.json()["total"] == 3
    assert [e["full_name"] for e in r.json()["items"]] == ["Andi", "Bambang", "Citra"]

    r = client.get("/employees", headers=admin_headers, params={"education": "S2"})
    assert {e["full_name"] for e in r.json()["items"]} == {"Andi", "Citra"}

    r = client.get("/employees", headers=admin_headers, params={"search": "bamb"})
    assert [e["full_name"] for e in r.json()["items"]] == ["Bambang"]

    r = client.get("/employees", headers=admin_headers, params={"search": "0811111"})
    assert r.json()["total"] == 1

    r = client.get("/employees", headers=admin_headers, params={"is_active": "false"})
    assert [e["full_name"] for e in r.json()["items"]] == ["Citra"]

    r = client.get("/employees", headers=admin_headers, params={"limit": 2, "offset": 2})
    assert r.json()["total"] == 3
    assert [e["full_name"] for e in r.json()["items"]] == ["Citra"]


def test_list_rejects_oversized_page(client, admin_headers):
    r = client.get("/employees", headers=admin_headers, params={"limit": 1000})
    assert r.status_code == 422


def test_filter_by_current_position(client, admin_headers, make_employee):
    moved = make_employee(full_name="Dewi")
    stayed = make_employee(full_name="Eko")
    with session_scope() as session:
        session.add_all([
            JobHistoryRecord(employee_id=moved.id, institution="Dinas A", unit="Unit A",
                             position="Staf", start_date=date(2010, 1, 1), end_date=date(2020, 1, 1)),
            JobHistoryRecord(employee_id=moved.id, institution="Dinas B", unit="Unit B",
                             position="Kepala Seksi", start_date=date(2020, 1, 1)),
            JobHistoryRecord(employee_id=stayed.id, institution="Dinas A", unit="Unit A",
                             position="Staf", start_date=date(2012, 1, 1)),
        ])

    r = client.get("/employees", headers=admin_headers, params={"institution": "Dinas A"})
    assert [e["full_name"] for e in r.json()["items"]] == ["Eko"]

    r = client.get("/employees", headers=admin_headers, params={"institution": "Dinas B", "unit": "Unit B"})
    assert [e["full_name"] for e in r.json()["items"]] == ["Dewi"]

    r = client.get("/employees", headers=admin_headers, params={"position": "Kepala Seksi"})
    assert r.json()["total"] == 1


def test_employee_sees_only_own_record(client, employee_user, make_employee):
    me, headers = employee_user
    other = make_employee()

    assert client.get(f"/employees/{me.id}", headers=headers).status_code == 200
    r = client.get(f"/employees/{other.id}", headers=headers)
    assert r.status_code == 403
    assert r.json()["error"] == "permission_denied"
    assert client.get("/employees", headers=headers).status_code == 403
    assert client.post("/employees", headers=headers, json=_payload()).status_code == 403


def test_employee_cannot_change_nip_or_active_flag(client, employee_user):
    me, headers = employee_user
    r = client.patch(f"/employees/{me.id}", headers=headers, json={"phone": "0877", "nip": "000"})
    assert r.status_code == 403
    assert r.json()["error"] == "permission_denied"
    assert "nip" in r.json()["detail"]

    r = client.patch(f"/employees/{me.id}", headers=headers, json={"is_active": False})
    assert r.status_code == 403

    r = client.get(f"/employees/{me.id}", headers=headers)
    assert r.json()["phone"] == EMPLOYEE_DATA["phone"]
    assert r.json()["nip"] == me.nip
    assert r.json()["is_active"] is True


def test_employee_may_echo_unchanged_protected_fields(client, employee_user):
    me, headers = employee_user
    r = client.patch(
        f"/employees/{me.id}",
        headers=headers,
        json={"phone": "0877", "nip": me.nip, "is_active": True},
    )
    assert r.status_code == 200
    assert r.json()["phone"] == "0877"


def test_delete_cascades_and_unlinks_account(client, admin_headers, employee_user):
    me, _ = employee_user
    with session_scope() as session:
        session.add(JobHistoryRecord(employee_id=me.id, institution="Dinas A", unit="Unit A",
                                     position="Staf", start_date=date(2015, 3, 1)))

    r = client.delete(f"/employees/{me.id}", headers=admin_headers)
    assert r.status_code == 204
    assert client.get(f"/employees/{me.id}", headers=admin_headers).status_code == 404

    with session_scope() as session:
        assert session.query(JobHistoryRecord).count() == 0
        account = session.query(Account).filter_by(username="siti").one()
        assert account.employee_id is None


def test_delete_missing_employee(client, admin_headers):
    assert client.delete("/employees/999", headers=admin_headers).status_code == 404
