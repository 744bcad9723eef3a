"""Health Probes: liveness and readiness for container orchestration.

Invariants:
    - GET /health/ answers 200 whenever the process can serve requests
    - GET /health/ready answers 503 until the database answers SELECT 1
    - Readiness also reports how many events currently hold a ledger lock (informational only)
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from rollcall.infrastructure import database
from rollcall.infrastructure.event_locks import EventLockRegistry, get_event_locks

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "rollcall-api"


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready")
async def readiness(locks: EventLockRegistry = Depends(get_event_locks)):
    """Ready once the database is reachable."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        logger.warning("Readiness probe failed: database unreachable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "active_event_locks": len(locks),
    }
