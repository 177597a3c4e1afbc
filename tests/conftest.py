"""Test fixtures for the PNS personnel service."""

import itertools
import os
from datetime import date

import pytest
from fastapi.testclient import TestClient

# Must be set before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-0123456789abcdef0123456789abcdef"
os.environ["WILAYAH_API_URL"] = "https://wilayah.test/api"

import models  # noqa: E402
from accounts import create_account  # noqa: E402
from db import Base, engine, session_scope  # noqa: E402
from directory import create_employee  # noqa: E402
from models import Role  # noqa: E402
from schemas import AccountCreate, EmployeeCreate  # noqa: E402

ADMIN_PASSWORD = "admin-password"
EMPLOYEE_PASSWORD = "pegawai-password"

EMPLOYEE_DATA = {
    "nip": "198501012010011001",
    "full_name": "Budi Santoso",
    "phone": "081234567890",
    "email": "budi.santoso@example.go.id",
    "npwp": "12.345.678.9-012.000",
    "birth_date": date(1985, 1, 1),
    "education": "S1",
    "blood_type": "O",
    "province_id": "31",
    "province_name": "DKI JAKARTA",
    "city_id": "31.71",
    "city_name": "KOTA ADMINISTRASI JAKARTA PUSAT",
    "district_id": "31.71.01",
    "district_name": "GAMBIR",
    "village_id": "31.71.01.1001",
    "village_name": "GAMBIR",
}


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield


@pytest.fixture(scope="session")
def client():
    from main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_employee():
    seq = itertools.count(1)

    def _make(**overrides) -> models.Employee:
        data = {**EMPLOYEE_DATA, "nip": f"19850101201001{next(seq):04d}", **overrides}
        with session_scope() as session:
            return create_employee(session, EmployeeCreate(**data))

    return _make


@pytest.fixture
def make_account():
    def _make(username: str, password: str, role: Role, employee_id: int | None = None) -> models.Account:
        with session_scope() as session:
            return create_account(
                session,
                AccountCreate(username=username, password=password, role=role, employee_id=employee_id),
            )

    return _make


def bearer(client: TestClient, username: str, password: str) -> dict:
    r = client.post("/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def admin_headers(client, make_account):
    make_account("admin", ADMIN_PASSWORD, Role.ADMIN)
    return bearer(client, "admin", ADMIN_PASSWORD)


@pytest.fixture
def employee_user(client, make_employee, make_account):
    """An employee record plus a logged-in employee account linked to it."""
    employee = make_employee(full_name="Siti Rahayu")
    make_account("siti", EMPLOYEE_PASSWORD, Role.EMPLOYEE, employee.id)
    return employee, bearer(client, "siti", EMPLOYEE_PASSWORD)
