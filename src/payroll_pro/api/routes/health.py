"""Health, readiness and liveness probes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from payroll_pro import __version__
from payroll_pro.api.dependencies import DbSession
from payroll_pro.models import Employee

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
    database: str


async def _database_ok(db: DbSession) -> bool:
    # Querying a real table also catches a missing schema
    try:
        await db.scalar(select(func.count()).select_from(Employee))
    except SQLAlchemyError as e:
        logger.warning("Database check failed: %s", e)
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession) -> HealthResponse:
    """API and database health; degraded when the database is unreachable."""
    healthy = await _database_ok(db)
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        database="healthy" if healthy else "unhealthy",
    )


@router.get("/ready", responses={503: {"description": "Database unavailable"}})
async def readiness_check(db: DbSession) -> JSONResponse:
    if not await _database_ok(db):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"},
        )
    return JSONResponse(content={"status": "ready"})


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
