"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel
from sqlalchemy import text

from frameup.api.deps import NotifierDep, PaymentsDep
from frameup.config import settings
from frameup.logging import get_logger

router = APIRouter(tags=["Health"])
logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    components: dict[str, bool] | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    database: bool
    redis: bool
    components: dict[str, bool] | None = None


def _database_ok() -> bool:
    from frameup.db.session import engine

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return False


def _redis_ok() -> bool:
    import redis

    try:
        client = redis.from_url(settings.redis_url, socket_connect_timeout=2)
        client.ping()
        return True
    except redis.RedisError as e:
        logger.error("redis_health_check_failed", error=str(e))
        return False


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Basic health check endpoint that verifies the API is running.",
)
async def health_check() -> HealthResponse:
    """Basic health check - is the API up?

    `components` tells whether each collaborator is a real provider
    (True) or the stub (False).
    """
    from frameup import __version__

    providers = {
        "payments": settings.payment_provider,
        "notifications": settings.notification_provider,
    }

    return HealthResponse(
        status="healthy",
        version=__version__,
        components={k: v.lower() != "stub" for k, v in providers.items()},
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Verifies the database, Redis and the payment and notification providers.",
)
async def readiness_check(payments: PaymentsDep, notifier: NotifierDep) -> ReadinessResponse:
    """Comprehensive readiness check including dependencies."""
    database_ok = _database_ok()
    redis_ok = _redis_ok()

    components = {
        f"payments:{payments.name}": await payments.health_check(),
        f"notifications:{notifier.name}": await notifier.health_check(),
    }
    ready = database_ok and redis_ok and all(components.values())
    if not ready:
        logger.warning("readiness_check_failed", database=database_ok, redis=redis_ok, **components)

    return ReadinessResponse(
        ready=ready,
        database=database_ok,
        redis=redis_ok,
        components=components,
    )


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    description="Simple liveness probe for Kubernetes.",
)
async def liveness_check() -> dict[str, str]:
    """Kubernetes liveness probe - is the process alive?"""
    return {"status": "alive"}
