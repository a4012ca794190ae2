"""Liveness and readiness probes."""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from portal.db.base import ping_db
from portal.db.redis import ping_redis

logger = structlog.get_logger(__name__)

router = APIRouter()

SERVICE_NAME = "client-portal-backend"


@router.get("/health")
async def health_check(request: Request):
    """Liveness probe. Answers 503 once SIGTERM was received so traffic drains."""
    if getattr(request.app.state, "shutting_down", False):
        return JSONResponse(
            status_code=503,
            content={"status": "shutting_down", "service": SERVICE_NAME},
        )
    return {"status": "healthy", "service": SERVICE_NAME}


async def _probe(name: str, ping) -> bool:
    try:
        return await ping()
    except Exception as e:
        logger.error("readiness_check_failed", dependency=name, error=str(e), error_type=type(e).__name__)
        return False


@router.get("/ready")
async def readiness_check():
    """Readiness probe: the database and the Redis session store must both answer."""
    checks = {
        "database": await _probe("database", ping_db),
        "redis": await _probe("redis", ping_redis),
    }
    ready = all(checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "degraded", "checks": checks},
    )
