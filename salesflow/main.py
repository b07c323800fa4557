"""
FastAPI application factory with health endpoint and service routing.

This module builds the FastAPI application: CORS configuration, request
logging with correlation ids, translation of service errors into JSON
responses, and the lifespan that owns the Database store.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salesflow.api.v1 import (
    auth_router,
    customers_router,
    orders_router,
    products_router,
    users_router,
    vehicles_router,
)
from salesflow.core.config import Settings, get_settings
from salesflow.core.logging import (
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    log_performance,
    set_request_id,
)
from salesflow.database.connection import create_database
from salesflow.services.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    SalesFlowError,
)
from salesflow.services.orders.state_machine import StateTransitionError
from salesflow.services.seed import seed_demo_data

logger = get_logger(__name__)

# Most specific first; the first matching class wins.
ERROR_STATUS_CODES = (
    (InvalidInputError, 422, "Invalid Input"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "Not Found"),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN, "Permission Denied"),
    (StateTransitionError, status.HTTP_409_CONFLICT, "Invalid State Transition"),
    (ConflictError, status.HTTP_409_CONFLICT, "Conflict"),
)


def _error_status(exc: SalesFlowError) -> tuple[int, str]:
    for error_class, status_code, title in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code, title
    return status.HTTP_400_BAD_REQUEST, "Bad Request"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan context manager for startup and shutdown events.

    Creates the store on startup, optionally loads the demo data, and
    disposes it on shutdown. An in-memory store does not survive shutdown.
    """
    settings: Settings = app.state.settings

    logger.info(
        "Application starting",
        environment=settings.environment,
        debug=settings.debug,
        version=settings.app_version,
    )

    with log_performance(logger, "application_startup"):
        database = create_database(settings)
        if settings.seed_demo_data:
            with database.session() as session:
                seed_demo_data(session)
        app.state.database = database

    yield

    logger.info("Application shutting down")
    with log_performance(logger, "application_shutdown"):
        database.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to run with, cached settings when omitted

    Returns:
        Configured application; the store is created when the lifespan
        starts
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Sales order management API",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        """
        Sets request ID for correlation, logs request details, and measures
        response time. Clears context after request processing.
        """
        request_id = set_request_id(request.headers.get("X-Request-ID"))

        logger.info(
            "Request received",
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        try:
            with log_performance(
                logger,
                "request_processing",
                method=request.method,
                path=request.url.path,
            ):
                response = await call_next(request)

            response.headers["X-Request-ID"] = request_id

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            return response
        finally:
            clear_context()

    @app.exception_handler(SalesFlowError)
    async def service_error_handler(request: Request, exc: SalesFlowError) -> JSONResponse:
        status_code, title = _error_status(exc)
        logger.warning(
            "Request rejected by service",
            method=request.method,
            path=request.url.path,
            error_type=type(exc).__name__,
            error=exc.message,
            status_code=status_code,
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "error": title,
                "message": exc.message,
                "details": jsonable_encoder(exc.context),
                "request_id": get_request_id(),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "Request validation failed",
            method=request.method,
            path=request.url.path,
            errors=jsonable_encoder(exc.errors()),
        )
        return JSONResponse(
            status_code=422,
            content={
                "error": "Validation Error",
                "message": "Request validation failed",
                "details": jsonable_encoder(exc.errors()),
                "request_id": get_request_id(),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Logs the error with full context and returns a generic message that
        does not expose internal details.
        """
        logger.error(
            "Unhandled exception",
            method=request.method,
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred",
                "request_id": get_request_id(),
            },
        )

    @app.get(
        "/health",
        status_code=status.HTTP_200_OK,
        tags=["Health"],
        summary="Health check endpoint",
    )
    def health_check(request: Request) -> dict[str, str]:
        """Report application status and whether the store answers."""
        database = request.app.state.database
        return {
            "status": "healthy" if database.check_health() else "degraded",
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        }

    for router in (
        auth_router,
        orders_router,
        customers_router,
        products_router,
        vehicles_router,
        users_router,
    ):
        app.include_router(router, prefix=settings.api_v1_prefix)

    logger.info("Application created", app_name=settings.app_name)
    return app
