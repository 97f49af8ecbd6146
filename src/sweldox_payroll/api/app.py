"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from sweldox_payroll.api.routes import health_router, payrolls_router
from sweldox_payroll.config import get_settings
from sweldox_payroll.database import dispose_db, init_db
from sweldox_payroll.errors import (
    BatchAbortedError,
    CompensationNotFoundError,
    PayrollConflictError,
    PayrollError,
    PayrollNotFoundError,
    PayrollValidationError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    init_db()
    yield
    await dispose_db()


def _error(status_code: int, exc: Exception, code: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": code, **extra},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Sweldox Payroll API",
        description="Semi-monthly payroll generation",
        version=settings.engine_version,
        lifespan=lifespan,
    )

    @app.exception_handler(PayrollConflictError)
    async def conflict_handler(request: Request, exc: PayrollConflictError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, exc, "PAYROLL_EXISTS")

    @app.exception_handler(PayrollNotFoundError)
    async def not_found_handler(request: Request, exc: PayrollNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, exc, "PAYROLL_NOT_FOUND")

    @app.exception_handler(CompensationNotFoundError)
    async def compensation_handler(
        request: Request, exc: CompensationNotFoundError
    ) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, exc, "COMPENSATION_NOT_FOUND")

    @app.exception_handler(PayrollValidationError)
    async def validation_handler(
        request: Request, exc: PayrollValidationError
    ) -> JSONResponse:
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc, "INVALID_PAYROLL_INPUT")

    @app.exception_handler(BatchAbortedError)
    async def batch_aborted_handler(request: Request, exc: BatchAbortedError) -> JSONResponse:
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            exc,
            "BATCH_ABORTED",
            created_count=exc.summary.created_count,
        )

    @app.exception_handler(PayrollError)
    async def payroll_error_handler(request: Request, exc: PayrollError) -> JSONResponse:
        logger.error("Payroll request failed: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "PAYROLL_ERROR")

    app.include_router(health_router)
    app.include_router(payrolls_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
