"""Login, self-registration and the current-account endpoint."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import accounts
from auth import require_account
from db import get_session
from models import Account
from schemas import AccountOut, LoginRequest, LoginResponse, RegisterRequest

router = APIRouter()


@router.post("/login", response_model=LoginResponse, tags=["auth"])
def login(body: LoginRequest, session: Session = Depends(get_session)):
    """
    Exchange username + password for a signed bearer token.
    Wrong username and wrong password produce the same 401.
    """
    return LoginResponse.model_validate(accounts.login(session, body), from_attributes=True)


@router.post("/register", response_model=AccountOut, status_code=status.HTTP_201_CREATED, tags=["auth"])
def register(body: RegisterRequest, session: Session = Depends(get_session)):
    return AccountOut.model_validate(accounts.register(session, body))


@router.get("/me", response_model=AccountOut, tags=["auth"])
def me(account: Account = Depends(require_account)):
    return AccountOut.model_validate(account)
