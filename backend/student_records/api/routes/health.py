"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 while the process is up and never
      acquires a database connection (liveness)
    - GET /health/ready returns 503 if the database is unreachable (readiness)
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from student_records.api.dependencies import get_db_manager
from student_records.infrastructure.database import DatabaseSessionManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness: answers without touching storage."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def readiness_check(
    db: DatabaseSessionManager | None = Depends(get_db_manager),
):
    """Readiness: includes database connectivity."""
    db_ok = await db.health_check() if db else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
