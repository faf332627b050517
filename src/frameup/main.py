"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from frameup import __version__
from frameup.api.routes import health, pricing, projects, videos
from frameup.config import settings
from frameup.domain.errors import (
    InvalidDeliveryUrlError,
    InvalidTransitionError,
    NotFoundError,
    PaymentRequiredError,
    ProjectValidationError,
    SequenceLockedError,
    WorkflowError,
)
from frameup.logging import get_logger, setup_logging

# Setup logging
setup_logging()
logger = get_logger(__name__)

# Workflow error -> HTTP status
ERROR_STATUS_CODES: dict[type[WorkflowError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    SequenceLockedError: status.HTTP_409_CONFLICT,
    PaymentRequiredError: status.HTTP_402_PAYMENT_REQUIRED,
    InvalidDeliveryUrlError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ProjectValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("application_starting", version=__version__)

    # Startup: verify database connection
    try:
        from frameup.db.session import create_all, init_db

        init_db()
        if settings.database_url.startswith("sqlite"):
            create_all()
        logger.info("database_connected")
    except Exception as e:
        logger.error("database_connection_failed", error=str(e))
        # Don't raise - let health checks report the issue

    yield

    # Shutdown
    logger.info("application_shutting_down")


# Create FastAPI app
app = FastAPI(
    title="FrameUp",
    description="Batch video delivery and approval workflow",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError) -> JSONResponse:
    """Translate workflow errors into HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    content: dict[str, str] = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, PaymentRequiredError):
        content["amount_due"] = str(exc.amount)

    logger.info(
        "workflow_error",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content=content)


# Register routers
app.include_router(health.router)
app.include_router(projects.router, prefix="/api/v1")
app.include_router(videos.router, prefix="/api/v1")
app.include_router(pricing.router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint redirect to docs."""
    return {
        "name": "FrameUp",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "frameup.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
