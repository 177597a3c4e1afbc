"""Job history (riwayat jabatan) endpoints."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

import job_history
from auth import ensure_can_access_employee, require_account, require_admin
from db import get_session
from models import Account
from schemas import JobHistoryCreate, JobHistoryOut, JobHistoryUpdate

router = APIRouter()


@router.get("/employees/{employee_id}/job-history", response_model=list[JobHistoryOut], tags=["job-history"])
def list_job_history(
    employee_id: int,
    session: Session = Depends(get_session),
    account: Account = Depends(require_account),
):
    ensure_can_access_employee(account, employee_id)
    return [JobHistoryOut.model_validate(r) for r in job_history.list_for_employee(session, employee_id)]


@router.get(
    "/employees/{employee_id}/job-history/current",
    response_model=JobHistoryOut | None,
    tags=["job-history"],
)
def current_position(
    employee_id: int,
    session: Session = Depends(get_session),
    account: Account = Depends(require_account),
):
    """Latest record by TMT; null when the employee has no history yet."""
    ensure_can_access_employee(account, employee_id)
    record = job_history.current_position(session, employee_id)
    return JobHistoryOut.model_validate(record) if record else None


@router.post(
    "/employees/{employee_id}/job-history",
    response_model=JobHistoryOut,
    status_code=status.HTTP_201_CREATED,
    tags=["job-history"],
)
def add_job_history(
    employee_id: int,
    body: JobHistoryCreate,
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    return JobHistoryOut.model_validate(job_history.add_record(session, employee_id, body))


@router.patch("/job-history/{record_id}", response_model=JobHistoryOut, tags=["job-history"])
def correct_job_history(
    record_id: int,
    body: JobHistoryUpdate,
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    return JobHistoryOut.model_validate(job_history.update_record(session, record_id, body))


@router.delete("/job-history/{record_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["job-history"])
def delete_job_history(
    record_id: int,
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    job_history.delete_record(session, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
