"""Liveness and database/migration checks."""

from pathlib import Path

import structlog
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from db import engine

router = APIRouter()
log = structlog.get_logger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parents[1] / "alembic.ini"


def _head_revision() -> str | None:
    config = Config(str(ALEMBIC_INI))
    config.set_main_option("script_location", str(ALEMBIC_INI.parent / "alembic"))
    return ScriptDirectory.from_config(config).get_current_head()


@router.get("/health", tags=["meta"])
def health():
    return {"status": "ok"}


@router.get("/health/deep", tags=["meta"])
def health_deep():
    """Schema revision vs. migration head. Tables created by init_db have no revision."""
    try:
        with engine.connect() as conn:
            current = MigrationContext.configure(conn).get_current_revision()
    except SQLAlchemyError as e:
        log.warning("health.db_unreachable", error=str(e))
        return {"status": "degraded", "db": "error", "error": str(e)}

    head = _head_revision()
    return {
        "status": "ok",
        "db": "connected",
        "revision": current,
        "head": head,
        "migrations_pending": current != head,
    }
