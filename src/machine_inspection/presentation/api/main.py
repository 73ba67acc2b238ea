"""FastAPI main application module."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from ...application.services.report_service import ReportNotFoundError
from ...infrastructure.logging import get_logger, setup_logging_from_settings
from ...infrastructure.services import initialize_services, shutdown_services
from .routes import health, reports, scoring
from .config import get_settings
from .middleware import RequestResponseLoggingMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    setup_logging_from_settings(get_settings())
    logger.info("Starting Machine Inspection Service API")
    await initialize_services()

    yield

    # Shutdown
    logger.info("Shutting down Machine Inspection Service API")
    await shutdown_services()


def add_exception_handlers(app: FastAPI) -> None:
    """Add custom exception handlers to the FastAPI application."""

    @app.exception_handler(ReportNotFoundError)
    async def report_not_found_handler(request: Request, exc: ReportNotFoundError):
        """Handle lookups of unknown reports."""
        logger.warning(f"Report not found on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=404,
            content={
                "detail": str(exc),
                "type": "not_found"
            }
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        """Handle validation errors from business logic."""
        logger.warning(f"Validation error on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=400,
            content={
                "detail": str(exc),
                "type": "validation_error"
            }
        )

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(request: Request, exc: RuntimeError):
        """Handle runtime errors from business logic."""
        logger.error(f"Runtime error on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error occurred",
                "type": "runtime_error"
            }
        )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Machine Inspection Service",
        description="API for machine inspection reports with condition scoring and ratings",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    add_exception_handlers(app)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.allowed_methods,
        allow_headers=settings.allowed_headers,
    )

    if settings.log_requests:
        app.add_middleware(RequestResponseLoggingMiddleware)

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(
        scoring.router,
        prefix=f"{settings.api_prefix}/scoring",
        tags=["scoring"]
    )
    app.include_router(
        reports.router,
        prefix=f"{settings.api_prefix}/reports",
        tags=["reports"]
    )

    return app


# Create app instance
app = create_app()
