"""
CLI entry point: create an administrator account.
Needed once per deployment -- every other account is created through the API.

Usage:
    python create_admin.py <username>
    python create_admin.py <username> --password-stdin < secret.txt
"""

import getpass
import sys

from pydantic import ValidationError as SchemaError

from accounts import create_account
from db import init_db, session_scope
from errors import ServiceError
from models import Role
from schemas import AccountCreate


def _read_password(args: list[str]) -> str:
    if "--password-stdin" in args:
        return sys.stdin.readline().rstrip("\n")
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        print("Passwords do not match.")
        sys.exit(1)
    return password


def main():
    args = sys.argv[1:]
    if not args or args[0].startswith("-"):
        print("Usage: python create_admin.py <username> [--password-stdin]")
        sys.exit(1)

    username = args[0]
    password = _read_password(args)

    try:
        data = AccountCreate(username=username, password=password, role=Role.ADMIN)
    except SchemaError as exc:
        print(f"Invalid input: {exc.errors()[0]['msg']}")
        sys.exit(1)

    init_db()
    try:
        with session_scope() as session:
            account = create_account(session, data)
            account_id = account.id
    except ServiceError as exc:
        print(f"Failed: {exc.message}")
        sys.exit(1)

    print(f"Created admin account #{account_id}: {username}")


if __name__ == "__main__":
    main()
