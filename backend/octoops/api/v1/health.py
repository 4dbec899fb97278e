"""Liveness and readiness probes."""

import structlog
from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from octoops.config import get_settings
from octoops.db.session import DBSession

router = APIRouter()
logger = structlog.get_logger()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness: the process is up and serving."""
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@router.get("/health/ready")
async def readiness_check(db: DBSession, response: Response) -> dict[str, str | dict[str, str]]:
    """Readiness: the store answers a trivial query. 503 when it does not."""
    checks: dict[str, str] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("readiness_check_failed", check="database", error=str(exc))
        checks["database"] = f"unhealthy: {exc}"

    ready = all(value == "healthy" for value in checks.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if ready else "unhealthy",
        "version": get_settings().app_version,
        "checks": checks,
    }
