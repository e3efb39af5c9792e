"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /healthcheck always returns 200 if the process is up (liveness)
    - GET /healthcheck/ready returns 503 if the database is unreachable (readiness)
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from campus_api.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/healthcheck", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def healthcheck():
    """Basic liveness probe."""
    return {"msg": "Healthcheck passed"}


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
