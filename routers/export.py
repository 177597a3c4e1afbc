"""CSV export endpoint -- streams the employee roster with current position and retirement flag."""

import csv
import io
from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from auth import require_admin
from db import get_session
from directory import age_on, current_positions_subquery, retirement_window
from models import Account, Employee

router = APIRouter()

COLUMNS = [
    "id",
    "nip",
    "full_name",
    "phone",
    "email",
    "npwp",
    "birth_date",
    "education",
    "blood_type",
    "province_name",
    "city_name",
    "district_name",
    "village_name",
    "is_active",
    "institution",
    "unit",
    "position",
    "age",
    "approaching_retirement",
]


def _enrich(rows: list[dict], today: date | None = None) -> list[dict]:
    """Add age and approaching_retirement columns; rows without a birth date get neither."""
    today = today or date.today()
    oldest, youngest = retirement_window(today)
    result = []
    for r in rows:
        r = dict(r)
        birth = r.get("birth_date")
        if isinstance(birth, str):
            try:
                birth = date.fromisoformat(birth)
            except ValueError:
                birth = None
        age = age_on(birth, today) if birth else None
        r["age"] = age
        r["approaching_retirement"] = (
            birth is not None and bool(r.get("is_active", True)) and oldest <= birth <= youngest
        )
        result.append(r)
    return result


def fetch_roster(session: Session) -> list[dict]:
    current = current_positions_subquery()
    query = (
        select(Employee, current.c.institution, current.c.unit, current.c.position)
        .outerjoin(current, current.c.employee_id == Employee.id)
        .order_by(Employee.full_name, Employee.id)
    )
    rows = []
    for employee, institution, unit, position in session.execute(query):
        row = {col: getattr(employee, col) for col in COLUMNS if hasattr(employee, col)}
        row["education"] = employee.education.value
        row["blood_type"] = employee.blood_type.value
        row.update(institution=institution, unit=unit, position=position)
        rows.append(row)
    return rows


@router.get("", tags=["export"])
def export_csv(session: Session = Depends(get_session), _: Account = Depends(require_admin)):
    """Stream all employees as CSV with current position, age and approaching_retirement columns."""
    enriched = _enrich(fetch_roster(session))

    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=COLUMNS, extrasaction="ignore")
    writer.writeheader()
    writer.writerows(enriched)
    buf.seek(0)

    return StreamingResponse(
        iter([buf.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=pegawai.csv"},
    )
