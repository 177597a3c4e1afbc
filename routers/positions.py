"""Open position registry endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import positions
from auth import require_account, require_admin
from db import get_session
from models import Account
from schemas import PositionCreate, PositionOut, PositionUpdate

router = APIRouter()


@router.get("", response_model=list[PositionOut], tags=["positions"])
def list_open_positions(session: Session = Depends(get_session), _: Account = Depends(require_account)):
    """Active positions with at least one slot left."""
    return [PositionOut.model_validate(p) for p in positions.list_active(session)]


@router.get("/all", response_model=list[PositionOut], tags=["positions"])
def list_all_positions(session: Session = Depends(get_session), _: Account = Depends(require_admin)):
    return [PositionOut.model_validate(p) for p in positions.list_all(session)]


@router.post("", response_model=PositionOut, status_code=status.HTTP_201_CREATED, tags=["positions"])
def create_position(
    body: PositionCreate,
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    return PositionOut.model_validate(positions.create_position(session, body))


@router.get("/{position_id}", response_model=PositionOut, tags=["positions"])
def get_position(
    position_id: int,
    session: Session = Depends(get_session),
    _: Account = Depends(require_account),
):
    return PositionOut.model_validate(positions.get_position(session, position_id))


@router.patch("/{position_id}", response_model=PositionOut, tags=["positions"])
def update_position(
    position_id: int,
    body: PositionUpdate,
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    return PositionOut.model_validate(positions.update_position(session, position_id, body))


@router.post("/{position_id}/deactivate", response_model=PositionOut, tags=["positions"])
def deactivate_position(
    position_id: int,
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    return PositionOut.model_validate(positions.deactivate_position(session, position_id))
