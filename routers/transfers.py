"""Transfer (mutasi) request endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

import transfers
from auth import ensure_can_access_employee, require_account, require_admin
from db import get_session
from errors import PermissionDenied, ValidationError
from models import Account, Role
from schemas import Page, TransferCreate, TransferDecision, TransferFilter, TransferOut

router = APIRouter()


def _own_employee_id(account: Account) -> int:
    if account.employee_id is None:
        raise PermissionDenied("This account is not linked to an employee")
    return account.employee_id


@router.post("", response_model=TransferOut, status_code=status.HTTP_201_CREATED, tags=["transfers"])
def submit_transfer(
    body: TransferCreate,
    session: Session = Depends(get_session),
    account: Account = Depends(require_account),
):
    """Employees submit for themselves; admins must name the employee."""
    if account.role == Role.ADMIN:
        if body.employee_id is None:
            raise ValidationError("employee_id is required")
        employee_id = body.employee_id
    else:
        employee_id = _own_employee_id(account)
        if body.employee_id is not None:
            ensure_can_access_employee(account, body.employee_id)
    request = transfers.create_transfer(session, employee_id, body, submitted_by=account.id)
    return TransferOut.model_validate(request)


@router.get("", response_model=Page[TransferOut], tags=["transfers"])
def list_transfers(
    filters: Annotated[TransferFilter, Query()],
    session: Session = Depends(get_session),
    account: Account = Depends(require_account),
):
    if account.role != Role.ADMIN:
        own = _own_employee_id(account)
        if filters.employee_id is not None:
            ensure_can_access_employee(account, filters.employee_id)
        filters = filters.model_copy(update={"employee_id": own})
    page = transfers.list_transfers(session, filters)
    return Page[TransferOut](
        items=[TransferOut.model_validate(t) for t in page["items"]],
        total=page["total"],
    )


@router.get("/{transfer_id}", response_model=TransferOut, tags=["transfers"])
def get_transfer(
    transfer_id: int,
    session: Session = Depends(get_session),
    account: Account = Depends(require_account),
):
    request = transfers.get_transfer(session, transfer_id)
    ensure_can_access_employee(account, request.employee_id)
    return TransferOut.model_validate(request)


@router.post("/{transfer_id}/decision", response_model=TransferOut, tags=["transfers"])
def decide_transfer(
    transfer_id: int,
    body: TransferDecision,
    session: Session = Depends(get_session),
    admin: Account = Depends(require_admin),
):
    """
    Approve or reject a pending request.
    Approval appends job history and takes one slot from the matching open position.
    Deciding an already-decided request returns 409.
    """
    request = transfers.decide(session, transfer_id, body.status, body.admin_notes, decided_by=admin.id)
    return TransferOut.model_validate(request)


@router.delete("/{transfer_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["transfers"])
def delete_transfer(
    transfer_id: int,
    session: Session = Depends(get_session),
    account: Account = Depends(require_account),
):
    request = transfers.get_transfer(session, transfer_id)
    ensure_can_access_employee(account, request.employee_id)
    transfers.delete_transfer(session, transfer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
