"""
Storage layer for the PNS personnel database.

One SQLAlchemy session per request; ``session_scope`` commits on success and
rolls back on any exception, so multi-table writes (transfer approval) are
all-or-nothing.

Connection: DATABASE_URL env var (Postgres via psycopg2 in production,
SQLite for local runs and tests).
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from errors import DuplicateKey, PermissionDenied, ValidationError
from settings import settings


class Base(DeclarativeBase):
    pass


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            # In-memory databases live as long as their single connection.
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))


@event.listens_for(engine, "connect")
def _sqlite_foreign_keys(dbapi_conn, _record):
    # SQLite ignores ON DELETE CASCADE / SET NULL unless asked per connection.
    if engine.dialect.name == "sqlite":
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()


SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateKey(_integrity_message(exc)) from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_session() -> Iterator[Session]:
    """FastAPI dependency: one transaction per request."""
    with session_scope() as session:
        yield session


def flush_or_duplicate(session: Session) -> None:
    """Flush pending writes, translating unique violations into DuplicateKey."""
    try:
        session.flush()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateKey(_integrity_message(exc)) from exc


def apply_patch(obj, patch: dict, allowed: set | None = None) -> list[str]:
    """Set the provided fields on *obj*; returns the names that changed.

    ``None`` clears a nullable column and is rejected for a required one.
    A field outside *allowed* may be echoed back unchanged but not modified.
    """
    columns = obj.__table__.columns
    changed = []
    for field, value in patch.items():
        if allowed is not None and field not in allowed:
            if value != getattr(obj, field):
                raise PermissionDenied(f"You cannot change {field}")
            continue
        if value is None and not columns[field].nullable:
            raise ValidationError(f"{field} cannot be null")
        setattr(obj, field, value)
        changed.append(field)
    return changed


def _integrity_message(exc: IntegrityError) -> str:
    detail = str(exc.orig).lower()
    for column in ("nip", "username", "employee_id"):
        if column in detail:
            return f"A record with this {column} already exists"
    return "Record conflicts with an existing record"


def init_db() -> None:
    import models  # noqa: F401 -- registers tables on Base.metadata

    Base.metadata.create_all(engine)
