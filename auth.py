"""Password hashing, session tokens and the FastAPI auth dependencies."""

from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from config import TOKEN_ALGORITHM, TOKEN_TTL_MINUTES
from db import get_session
from errors import AuthenticationError, PermissionDenied
from models import Account, Role
from settings import settings

bearer_scheme = HTTPBearer(auto_error=False)

_PASSWORD_METHOD = "scrypt"

# Checked against when the username does not exist, so a miss costs the same
# as a wrong password.
_DUMMY_HASH = generate_password_hash("unused-placeholder-password", method=_PASSWORD_METHOD)


def hash_password(password: str) -> str:
    return generate_password_hash(password, method=_PASSWORD_METHOD)


def verify_password(password: str, password_hash: str | None) -> bool:
    if password_hash is None:
        check_password_hash(_DUMMY_HASH, password)
        return False
    return check_password_hash(password_hash, password)


def _secret() -> str:
    # Read at call time -- tests swap the key after import.
    # Fail-closed: no key configured means no token is issued or accepted.
    if not settings.SECRET_KEY:
        raise AuthenticationError("Authentication is not configured on this server")
    return settings.SECRET_KEY


def issue_token(account: Account) -> tuple[str, datetime]:
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=TOKEN_TTL_MINUTES)
    payload = {
        "sub": str(account.id),
        "role": account.role.value,
        "employee_id": account.employee_id,
        "iat": now,
        "exp": expires_at,
    }
    return jwt.encode(payload, _secret(), algorithm=TOKEN_ALGORITHM), expires_at


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            _secret(),
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid session token")


async def require_account(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    session: Session = Depends(get_session),
) -> Account:
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    claims = decode_token(credentials.credentials)
    try:
        account_id = int(claims["sub"])
    except ValueError:
        raise AuthenticationError("Invalid session token")
    # Re-load so a deleted account loses access before its token expires.
    account = session.get(Account, account_id)
    if account is None:
        raise AuthenticationError("Invalid session token")
    return account


async def require_admin(account: Account = Depends(require_account)) -> Account:
    if account.role != Role.ADMIN:
        raise PermissionDenied("Administrator access required")
    return account


def ensure_can_access_employee(account: Account, employee_id: int) -> None:
    """Admins see everyone; employees only their own record."""
    if account.role == Role.ADMIN:
        return
    if account.employee_id is None or account.employee_id != employee_id:
        raise PermissionDenied("You can only access your own records")
