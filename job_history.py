"""Job history ledger (riwayat jabatan).

The current position is never stored; it is whichever record has the latest
start date (TMT), ties going to the newest row.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from db import apply_patch
from directory import get_employee
from errors import NotFound
from models import JobHistoryRecord
from schemas import JobHistoryCreate, JobHistoryUpdate

log = structlog.get_logger(__name__)


def _ordered(employee_id: int):
    return (
        select(JobHistoryRecord)
        .where(JobHistoryRecord.employee_id == employee_id)
        .order_by(JobHistoryRecord.start_date.desc(), JobHistoryRecord.id.desc())
    )


def add_record(session: Session, employee_id: int, data: JobHistoryCreate) -> JobHistoryRecord:
    get_employee(session, employee_id)
    record = JobHistoryRecord(employee_id=employee_id, **data.model_dump())
    session.add(record)
    session.flush()
    log.info("job_history.added", employee_id=employee_id, record_id=record.id)
    return record


def list_for_employee(session: Session, employee_id: int) -> list[JobHistoryRecord]:
    get_employee(session, employee_id)
    return list(session.scalars(_ordered(employee_id)))


def current_position(session: Session, employee_id: int) -> JobHistoryRecord | None:
    get_employee(session, employee_id)
    return session.scalars(_ordered(employee_id).limit(1)).first()


def get_record(session: Session, record_id: int) -> JobHistoryRecord:
    record = session.get(JobHistoryRecord, record_id)
    if record is None:
        raise NotFound(f"Job history record {record_id} not found")
    return record


def update_record(session: Session, record_id: int, patch: JobHistoryUpdate) -> JobHistoryRecord:
    """Admin correction."""
    record = get_record(session, record_id)
    changed = apply_patch(record, patch.model_dump(exclude_unset=True))
    if changed:
        session.flush()
        log.info("job_history.corrected", record_id=record_id, fields=changed)
    return record


def delete_record(session: Session, record_id: int) -> None:
    record = get_record(session, record_id)
    session.delete(record)
    session.flush()
    log.info("job_history.deleted", record_id=record_id)
