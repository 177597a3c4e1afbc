"""Open position registry (posisi tersedia) and its quota bookkeeping."""

import structlog
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from db import apply_patch
from errors import NotFound
from models import OpenPosition
from schemas import PositionCreate, PositionUpdate

log = structlog.get_logger(__name__)


def create_position(session: Session, data: PositionCreate) -> OpenPosition:
    position = OpenPosition(**data.model_dump(), is_active=True)
    session.add(position)
    session.flush()
    log.info("position.created", position_id=position.id, quota=position.quota)
    return position


def get_position(session: Session, position_id: int) -> OpenPosition:
    position = session.get(OpenPosition, position_id)
    if position is None:
        raise NotFound(f"Open position {position_id} not found")
    return position


def update_position(session: Session, position_id: int, patch: PositionUpdate) -> OpenPosition:
    position = get_position(session, position_id)
    changed = apply_patch(position, patch.model_dump(exclude_unset=True))
    if changed:
        session.flush()
        log.info("position.updated", position_id=position_id, fields=changed)
    return position


def deactivate_position(session: Session, position_id: int) -> OpenPosition:
    """Soft delete -- old transfer requests still name this position."""
    position = get_position(session, position_id)
    position.is_active = False
    session.flush()
    log.info("position.deactivated", position_id=position_id)
    return position


def list_active(session: Session) -> list[OpenPosition]:
    query = (
        select(OpenPosition)
        .where(OpenPosition.is_active.is_(True), OpenPosition.quota > 0)
        .order_by(OpenPosition.institution, OpenPosition.unit, OpenPosition.position)
    )
    return list(session.scalars(query))


def list_all(session: Session) -> list[OpenPosition]:
    return list(session.scalars(select(OpenPosition).order_by(OpenPosition.id)))


def find_match(session: Session, institution: str, unit: str, position: str) -> OpenPosition | None:
    query = (
        select(OpenPosition)
        .where(
            OpenPosition.is_active.is_(True),
            OpenPosition.institution == institution,
            OpenPosition.unit == unit,
            OpenPosition.position == position,
        )
        .order_by(OpenPosition.quota.desc(), OpenPosition.id)
    )
    return session.scalars(query).first()


def consume_slot(session: Session, position_id: int) -> bool:
    """Take one slot. Returns False when the quota was already zero.

    A single conditional UPDATE, so concurrent approvals cannot both take the
    last slot or push the quota below zero.
    """
    result = session.execute(
        update(OpenPosition)
        .where(OpenPosition.id == position_id, OpenPosition.quota > 0)
        .values(quota=OpenPosition.quota - 1)
        .execution_options(synchronize_session=False)
    )
    consumed = result.rowcount == 1
    if consumed:
        position = session.get(OpenPosition, position_id)
        if position is not None:
            session.refresh(position)
    return consumed
