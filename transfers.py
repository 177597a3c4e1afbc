"""
Transfer (mutasi) workflow.

    pending --approve--> approved   (terminal)
            --reject---> rejected   (terminal)

Approval is one transaction: the request row is locked, the destination's
quota is decremented with a conditional UPDATE, the employee's open job
record is closed and a new one appended. Any failure rolls back all of it.
An effective date earlier than the open record's start date is refused.

Exhausted quota on approval follows settings.QUOTA_EXHAUSTED_POLICY:
``reject`` fails the approval with InvalidState, ``warn`` logs and approves.
A destination with no matching open position is always approved with a
warning.
"""

from datetime import date, datetime, timezone

import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

import positions
from directory import get_employee
from errors import InvalidState, NotFound, ValidationError
from models import JobHistoryRecord, TransferRequest, TransferStatus
from schemas import TransferCreate, TransferFilter
from settings import settings

log = structlog.get_logger(__name__)

TERMINAL_STATUSES = {TransferStatus.APPROVED, TransferStatus.REJECTED}


def create_transfer(
    session: Session, employee_id: int, data: TransferCreate, submitted_by: int | None = None
) -> TransferRequest:
    get_employee(session, employee_id)
    request = TransferRequest(
        employee_id=employee_id,
        **data.model_dump(exclude={"employee_id"}),
        status=TransferStatus.PENDING,
        submitted_at=datetime.now(timezone.utc),
        decided_at=None,
        admin_notes=None,
        submitted_by=submitted_by,
    )
    session.add(request)
    session.flush()
    log.info("transfer.submitted", transfer_id=request.id, employee_id=employee_id)
    return request


def get_transfer(session: Session, transfer_id: int) -> TransferRequest:
    request = session.get(TransferRequest, transfer_id)
    if request is None:
        raise NotFound(f"Transfer request {transfer_id} not found")
    return request


def list_transfers(session: Session, f: TransferFilter) -> dict:
    query = select(TransferRequest)
    if f.employee_id is not None:
        query = query.where(TransferRequest.employee_id == f.employee_id)
    if f.status is not None:
        query = query.where(TransferRequest.status == f.status)

    total = session.scalar(select(func.count()).select_from(query.subquery()))
    items = session.scalars(
        query.order_by(TransferRequest.submitted_at.desc(), TransferRequest.id.desc())
        .limit(f.limit)
        .offset(f.offset)
    )
    return {"items": list(items), "total": total}


def _lock_pending(session: Session, transfer_id: int) -> TransferRequest:
    request = session.scalars(
        select(TransferRequest).where(TransferRequest.id == transfer_id).with_for_update()
    ).first()
    if request is None:
        raise NotFound(f"Transfer request {transfer_id} not found")
    if request.status in TERMINAL_STATUSES:
        raise InvalidState(f"Transfer request {transfer_id} is already {request.status.value}")
    return request


def decide(
    session: Session,
    transfer_id: int,
    new_status: TransferStatus,
    admin_notes: str | None = None,
    decided_by: int | None = None,
) -> TransferRequest:
    """Approve or reject a pending request. Re-deciding is an error, not a no-op."""
    if new_status not in TERMINAL_STATUSES:
        raise ValidationError("Decision must be 'approved' or 'rejected'")

    request = _lock_pending(session, transfer_id)
    request.status = new_status
    request.decided_at = datetime.now(timezone.utc)
    request.admin_notes = admin_notes
    request.decided_by = decided_by

    if new_status == TransferStatus.APPROVED:
        _apply_approval(session, request)

    session.flush()
    log.info(
        f"transfer.{new_status.value}",
        transfer_id=request.id,
        employee_id=request.employee_id,
        decided_by=decided_by,
    )
    return request


def _apply_approval(session: Session, request: TransferRequest) -> None:
    effective = request.effective_date or date.today()
    current = session.scalars(
        select(JobHistoryRecord)
        .where(JobHistoryRecord.employee_id == request.employee_id, JobHistoryRecord.end_date.is_(None))
        .order_by(JobHistoryRecord.start_date.desc(), JobHistoryRecord.id.desc())
        .with_for_update()
    ).first()
    # The new record must become the current position.
    if current is not None and effective < current.start_date:
        raise InvalidState(
            f"Effective date {effective.isoformat()} is before the current position's "
            f"start date {current.start_date.isoformat()}"
        )

    _consume_destination_slot(session, request)
    if current is not None:
        current.end_date = effective

    session.add(
        JobHistoryRecord(
            employee_id=request.employee_id,
            institution=request.destination_institution,
            unit=request.destination_unit,
            position=request.destination_position,
            start_date=effective,
            notes=f"Mutasi #{request.id}: {request.reason}",
        )
    )


def _consume_destination_slot(session: Session, request: TransferRequest) -> None:
    match = positions.find_match(
        session,
        request.destination_institution,
        request.destination_unit,
        request.destination_position,
    )
    if match is None:
        log.warning("transfer.no_open_position", transfer_id=request.id)
        return

    if positions.consume_slot(session, match.id):
        log.info("transfer.quota_consumed", transfer_id=request.id, position_id=match.id)
        return

    if settings.QUOTA_EXHAUSTED_POLICY == "reject":
        raise InvalidState(f"Open position {match.id} has no remaining quota")
    log.warning("transfer.quota_skipped", transfer_id=request.id, position_id=match.id)


def delete_transfer(session: Session, transfer_id: int) -> None:
    request = get_transfer(session, transfer_id)
    if request.status != TransferStatus.PENDING:
        raise InvalidState("Only pending requests can be deleted")
    session.delete(request)
    session.flush()
    log.info("transfer.deleted", transfer_id=transfer_id)
