"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from payroll_pro import __version__
from payroll_pro.api.routes import (
    attendance_router,
    auth_router,
    employees_router,
    health_router,
    leaves_router,
    payroll_router,
    payslips_router,
    tax_router,
)
from payroll_pro.auth.base import AuthProvider
from payroll_pro.auth.local_stub import LocalAuthProvider
from payroll_pro.config import Settings, get_settings
from payroll_pro.database import create_tables, dispose_db
from payroll_pro.errors import (
    AuthenticationError,
    BackendError,
    NotFoundError,
    PayrollProError,
    RateLimitError,
    ValidationError,
)
from payroll_pro.services.auth_service import RateLimiter
from payroll_pro.services.state_machine import InvalidTransitionError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    await create_tables()
    yield
    # Shutdown
    await dispose_db()


def _error(status_code: int, exc: Exception, code: str, **context) -> JSONResponse:
    content = {"detail": str(exc), "code": code}
    if context:
        content["context"] = context
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Map service errors to HTTP responses."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "detail": "Request validation failed",
                "code": "REQUEST_INVALID",
                "context": {"errors": jsonable_encoder(exc.errors())},
            },
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, exc, "VALIDATION_ERROR", field=exc.field)

    @app.exception_handler(InvalidTransitionError)
    async def transition_error_handler(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return _error(
            status.HTTP_400_BAD_REQUEST,
            exc,
            "INVALID_TRANSITION",
            from_status=str(exc.from_status),
            to_status=str(exc.to_status),
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, exc, "NOT_FOUND", entity=exc.entity)

    @app.exception_handler(AuthenticationError)
    async def auth_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
        return _error(status.HTTP_401_UNAUTHORIZED, exc, "AUTHENTICATION_FAILED")

    @app.exception_handler(RateLimitError)
    async def rate_limit_handler(request: Request, exc: RateLimitError) -> JSONResponse:
        response = _error(
            status.HTTP_429_TOO_MANY_REQUESTS, exc, "RATE_LIMITED", retry_after=exc.retry_after
        )
        response.headers["Retry-After"] = str(exc.retry_after)
        return response

    @app.exception_handler(BackendError)
    async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
        logger.error("Backend failure during %s: %s", exc.operation, exc.cause)
        return _error(status.HTTP_502_BAD_GATEWAY, exc, "BACKEND_ERROR")

    @app.exception_handler(PayrollProError)
    async def payroll_error_handler(request: Request, exc: PayrollProError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, exc, "PAYROLL_ERROR")

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Unhandled database error on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "Database operation failed", "code": "BACKEND_ERROR"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )


def create_app(
    settings: Settings | None = None,
    auth_provider: AuthProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="PayrollPro API",
        description="Employee records, attendance, leave, payroll and payslips",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.auth_provider = auth_provider or LocalAuthProvider()
    app.state.auth_rate_limiter = RateLimiter(
        window_seconds=settings.auth_rate_limit_seconds,
        capacity=settings.auth_rate_limit_capacity,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    for router in (
        employees_router,
        attendance_router,
        leaves_router,
        payroll_router,
        payslips_router,
        tax_router,
        auth_router,
    ):
        app.include_router(router, prefix="/api/v1")

    return app
