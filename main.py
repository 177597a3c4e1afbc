"""FastAPI entrypoint -- PNS Personnel Service."""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.BoundLogger,
    logger_factory=structlog.PrintLoggerFactory(),
)

from db import init_db
from errors import AuthenticationError, ServiceError
from routers import accounts, employees, export, health, job_history, positions, sessions, transfers, wilayah
from settings import settings

logger = logging.getLogger("kepegawaian.startup")
log = structlog.get_logger("kepegawaian.errors")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.SECRET_KEY:
        logger.warning("SECRET_KEY not set -- all authenticated requests will be rejected")
    init_db()
    yield


app = FastAPI(title="PNS Personnel Service", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    log.info("request.failed", path=request.url.path, error=exc.code, detail=exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
        headers=headers,
    )


app.include_router(health.router)
app.include_router(sessions.router, prefix="/auth")
app.include_router(accounts.router, prefix="/accounts")
app.include_router(employees.router, prefix="/employees")
app.include_router(job_history.router)
app.include_router(transfers.router, prefix="/transfers")
app.include_router(positions.router, prefix="/positions")
app.include_router(wilayah.router, prefix="/wilayah")
app.include_router(export.router, prefix="/export/csv")


@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs")
