# leaddocs/entrypoints/fastapi_app.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..config import settings
from ..errors import (
    ExternalServiceError,
    IntakeValidationError,
    InvalidTransitionError,
    LeadNotFoundError,
    TotalMaterializationFailure,
    VersionConflictError,
)
from .api.routers import health, leads, webhooks

log = logging.getLogger(__name__)


def _error(status_code: int, exc: Exception, **extra) -> JSONResponse:
    body = {"success": False, "error": exc.__class__.__name__, "detail": str(exc)}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(IntakeValidationError)
    async def _intake(request: Request, exc: IntakeValidationError) -> JSONResponse:
        return _error(400, exc, field=exc.field)

    @app.exception_handler(LeadNotFoundError)
    async def _not_found(request: Request, exc: LeadNotFoundError) -> JSONResponse:
        return _error(404, exc)

    @app.exception_handler(InvalidTransitionError)
    async def _transition(request: Request, exc: InvalidTransitionError) -> JSONResponse:
        return _error(409, exc, current=exc.current, target=exc.target)

    @app.exception_handler(VersionConflictError)
    async def _conflict(request: Request, exc: VersionConflictError) -> JSONResponse:
        return _error(409, exc)

    @app.exception_handler(TotalMaterializationFailure)
    async def _total(request: Request, exc: TotalMaterializationFailure) -> JSONResponse:
        return _error(502, exc, failures=[f.to_dict() for f in exc.failures])

    @app.exception_handler(ExternalServiceError)
    async def _external(request: Request, exc: ExternalServiceError) -> JSONResponse:
        return _error(503 if exc.retryable else 502, exc, operation=exc.operation)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="LeadDocs - Intake to Documents")

    @app.on_event("startup")
    async def _startup() -> None:
        # Only the SQL lead store needs tables; the sheet store writes its own header row.
        if (settings.LEAD_STORE_BACKEND or "").strip().lower() == "sql":
            from ..db import engine
            from ..models import Base

            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

    _install_error_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(webhooks.router)
    app.include_router(leads.router)

    return app
