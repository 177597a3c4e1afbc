"""Employee directory endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

import directory
from auth import ensure_can_access_employee, require_account, require_admin
from db import get_session
from models import Account, Role
from schemas import EmployeeCreate, EmployeeFilter, EmployeeOut, EmployeeUpdate, Page

router = APIRouter()


@router.get("", response_model=Page[EmployeeOut], tags=["employees"])
def list_employees(
    filters: Annotated[EmployeeFilter, Query()],
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    page = directory.list_employees(session, filters)
    return Page[EmployeeOut](
        items=[EmployeeOut.model_validate(e) for e in page["items"]],
        total=page["total"],
    )


@router.get("/approaching-retirement", response_model=list[EmployeeOut], tags=["employees"])
def approaching_retirement(session: Session = Depends(get_session), _: Account = Depends(require_admin)):
    """Active employees aged 56-60 today. Recomputed on every call."""
    return [EmployeeOut.model_validate(e) for e in directory.approaching_retirement(session)]


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED, tags=["employees"])
def create_employee(
    body: EmployeeCreate,
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    return EmployeeOut.model_validate(directory.create_employee(session, body))


@router.get("/{employee_id}", response_model=EmployeeOut, tags=["employees"])
def get_employee(
    employee_id: int,
    session: Session = Depends(get_session),
    account: Account = Depends(require_account),
):
    ensure_can_access_employee(account, employee_id)
    return EmployeeOut.model_validate(directory.get_employee(session, employee_id))


@router.patch("/{employee_id}", response_model=EmployeeOut, tags=["employees"])
def update_employee(
    employee_id: int,
    body: EmployeeUpdate,
    session: Session = Depends(get_session),
    account: Account = Depends(require_account),
):
    ensure_can_access_employee(account, employee_id)
    allowed = None if account.role == Role.ADMIN else directory.SELF_EDITABLE_FIELDS
    return EmployeeOut.model_validate(directory.update_employee(session, employee_id, body, allowed))


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["employees"])
def delete_employee(
    employee_id: int,
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    directory.delete_employee(session, employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
