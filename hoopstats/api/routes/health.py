"""Liveness and readiness checks."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from hoopstats.api.deps import DatabaseDep
from hoopstats.api.schemas import HealthStatus
from hoopstats.errors import StorageError

router = APIRouter(tags=["health"])


@router.get("/live", response_model=HealthStatus)
async def liveness() -> HealthStatus:
    """Process is up. Dependencies are not checked."""
    return HealthStatus(status="alive")


@router.get("/ready", response_model=HealthStatus, responses={503: {"model": HealthStatus}})
async def readiness(db: DatabaseDep):
    """Ready when the database answers a ping."""
    try:
        await db.ping()
    except StorageError:
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return HealthStatus(status="ready")
