"""Account administration (admin only)."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

import accounts
from auth import require_admin
from db import get_session
from errors import InvalidState
from models import Account
from schemas import AccountCreate, AccountOut

router = APIRouter()


@router.get("", response_model=list[AccountOut], tags=["accounts"])
def list_accounts(session: Session = Depends(get_session), _: Account = Depends(require_admin)):
    return [AccountOut.model_validate(a) for a in accounts.list_accounts(session)]


@router.post("", response_model=AccountOut, status_code=status.HTTP_201_CREATED, tags=["accounts"])
def create_account(
    body: AccountCreate,
    session: Session = Depends(get_session),
    _: Account = Depends(require_admin),
):
    return AccountOut.model_validate(accounts.create_account(session, body))


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["accounts"])
def delete_account(
    account_id: int,
    session: Session = Depends(get_session),
    admin: Account = Depends(require_admin),
):
    if account_id == admin.id:
        raise InvalidState("You cannot delete your own account")
    accounts.delete_account(session, account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
