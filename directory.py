"""
Employee directory: CRUD, filtered search and the retirement-window query.

"Approaching retirement" is derived from birth date on every call -- the
eligible population shifts daily, so nothing here is cached.
"""

from datetime import date, timedelta

import structlog
from sqlalchemy import Select, and_, func, not_, or_, select
from sqlalchemy.orm import Session

from config import RETIREMENT_MAX_AGE, RETIREMENT_MIN_AGE
from db import apply_patch, flush_or_duplicate
from errors import NotFound
from models import Employee, JobHistoryRecord
from schemas import EmployeeCreate, EmployeeFilter, EmployeeUpdate

log = structlog.get_logger(__name__)

# Fields an employee may change on their own record.
SELF_EDITABLE_FIELDS = set(EmployeeUpdate.model_fields) - {"nip", "is_active"}


def _years_ago(today: date, years: int) -> date:
    try:
        return today.replace(year=today.year - years)
    except ValueError:  # Feb 29 -> Feb 28 in a non-leap year
        return today.replace(year=today.year - years, day=28)


def age_on(birth_date: date, today: date) -> int:
    had_birthday = (today.month, today.day) >= (birth_date.month, birth_date.day)
    return today.year - birth_date.year - (0 if had_birthday else 1)


def retirement_window(today: date | None = None) -> tuple[date, date]:
    """Birth-date range (inclusive) for ages RETIREMENT_MIN_AGE..RETIREMENT_MAX_AGE.

    Both ends carry a one-day margin so exact 56th and 60th birthdays are in.
    """
    today = today or date.today()
    oldest = _years_ago(today, RETIREMENT_MAX_AGE) - timedelta(days=1)
    youngest = _years_ago(today, RETIREMENT_MIN_AGE) + timedelta(days=1)
    return oldest, youngest


def _retirement_condition(today: date | None = None):
    oldest, youngest = retirement_window(today)
    return and_(
        Employee.is_active.is_(True),
        Employee.birth_date >= oldest,
        Employee.birth_date <= youngest,
    )


def current_positions_subquery():
    """Latest job-history row per employee (by start date, then id)."""
    ranked = select(
        JobHistoryRecord.employee_id,
        JobHistoryRecord.institution,
        JobHistoryRecord.unit,
        JobHistoryRecord.position,
        func.row_number()
        .over(
            partition_by=JobHistoryRecord.employee_id,
            order_by=(JobHistoryRecord.start_date.desc(), JobHistoryRecord.id.desc()),
        )
        .label("rn"),
    ).subquery()
    return select(ranked).where(ranked.c.rn == 1).subquery()


# ── Mutations ──


def create_employee(session: Session, data: EmployeeCreate) -> Employee:
    employee = Employee(**data.model_dump())
    session.add(employee)
    flush_or_duplicate(session)
    log.info("employee.created", employee_id=employee.id, nip=employee.nip)
    return employee


def update_employee(
    session: Session, employee_id: int, patch: EmployeeUpdate, allowed: set | None = None
) -> Employee:
    employee = get_employee(session, employee_id)
    changed = apply_patch(employee, patch.model_dump(exclude_unset=True), allowed)
    if changed:
        flush_or_duplicate(session)
        log.info("employee.updated", employee_id=employee_id, fields=changed)
    return employee


def delete_employee(session: Session, employee_id: int) -> None:
    """Cascades to job history and transfers; linked accounts are unlinked."""
    employee = get_employee(session, employee_id)
    session.delete(employee)
    session.flush()
    session.expire_all()
    log.info("employee.deleted", employee_id=employee_id)


# ── Queries ──


def get_employee(session: Session, employee_id: int) -> Employee:
    employee = session.get(Employee, employee_id)
    if employee is None:
        raise NotFound(f"Employee {employee_id} not found")
    return employee


def _filtered(query: Select, f: EmployeeFilter) -> Select:
    if f.search:
        pattern = f"%{f.search.strip()}%"
        query = query.where(
            or_(
                Employee.full_name.ilike(pattern),
                Employee.nip.ilike(pattern),
                Employee.phone.ilike(pattern),
                Employee.npwp.ilike(pattern),
            )
        )
    if f.education is not None:
        query = query.where(Employee.education == f.education)
    if f.is_active is not None:
        query = query.where(Employee.is_active.is_(f.is_active))
    if f.approaching_retirement is not None:
        condition = _retirement_condition()
        query = query.where(condition if f.approaching_retirement else not_(condition))
    if f.institution or f.unit or f.position:
        current = current_positions_subquery()
        conditions = []
        if f.institution:
            conditions.append(current.c.institution == f.institution)
        if f.unit:
            conditions.append(current.c.unit == f.unit)
        if f.position:
            conditions.append(current.c.position == f.position)
        query = query.where(Employee.id.in_(select(current.c.employee_id).where(*conditions)))
    return query


def list_employees(session: Session, f: EmployeeFilter) -> dict:
    query = _filtered(select(Employee), f)
    total = session.scalar(select(func.count()).select_from(query.order_by(None).subquery()))
    items = session.scalars(query.order_by(Employee.full_name, Employee.id).limit(f.limit).offset(f.offset))
    return {"items": list(items), "total": total}


def approaching_retirement(session: Session, today: date | None = None) -> list[Employee]:
    query = select(Employee).where(_retirement_condition(today)).order_by(Employee.birth_date, Employee.id)
    return list(session.scalars(query))
