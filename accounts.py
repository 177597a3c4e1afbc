"""Login accounts: creation, listing, login and self-registration."""

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

import directory
from auth import hash_password, issue_token, verify_password
from db import flush_or_duplicate
from errors import AuthenticationError, NotFound, ValidationError
from models import Account, Employee, Role
from schemas import AccountCreate, LoginRequest, RegisterRequest

log = structlog.get_logger(__name__)

_BAD_CREDENTIALS = "Invalid username or password"


def create_account(session: Session, data: AccountCreate) -> Account:
    """
    An employee account must point at an existing employee; an admin account
    must not point at any.
    """
    if data.role == Role.EMPLOYEE:
        if data.employee_id is None:
            raise ValidationError("Employee accounts must be linked to an employee")
        if session.get(Employee, data.employee_id) is None:
            raise NotFound(f"Employee {data.employee_id} not found")
    elif data.employee_id is not None:
        raise ValidationError("Admin accounts cannot be linked to an employee")

    account = Account(
        username=data.username,
        password_hash=hash_password(data.password),
        role=data.role,
        employee_id=data.employee_id,
    )
    session.add(account)
    flush_or_duplicate(session)
    log.info("account.created", account_id=account.id, role=account.role.value)
    return account


def list_accounts(session: Session) -> list[Account]:
    return list(session.scalars(select(Account).order_by(Account.username)))


def get_account(session: Session, account_id: int) -> Account:
    account = session.get(Account, account_id)
    if account is None:
        raise NotFound(f"Account {account_id} not found")
    return account


def delete_account(session: Session, account_id: int) -> None:
    account = get_account(session, account_id)
    session.delete(account)
    session.flush()
    log.info("account.deleted", account_id=account_id)


def authenticate(session: Session, username: str, password: str) -> Account:
    """Same error for unknown username and wrong password."""
    account = session.scalar(select(Account).where(Account.username == username))
    if not verify_password(password, account.password_hash if account else None):
        log.warning("auth.login_failed", username=username)
        raise AuthenticationError(_BAD_CREDENTIALS)
    return account


def login(session: Session, data: LoginRequest) -> dict:
    account = authenticate(session, data.username, data.password)
    token, expires_at = issue_token(account)
    log.info("auth.login", account_id=account.id, role=account.role.value)
    return {"token": token, "token_type": "bearer", "expires_at": expires_at, "account": account}


def register(session: Session, data: RegisterRequest) -> Account:
    """Create an employee record and its login account together."""
    employee = directory.create_employee(session, data.employee)
    return create_account(
        session,
        AccountCreate(
            username=data.username,
            password=data.password,
            role=Role.EMPLOYEE,
            employee_id=employee.id,
        ),
    )
