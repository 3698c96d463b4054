"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: fastapi, sqlalchemy, simulator.boundary
System role: Liveness of the simulator, its transports and the history store
"""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from simulator import __version__
from simulator.boundary.db import get_async_db

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    version: str = __version__
    scenarios: int | None = None
    active_executions: dict[str, int] = Field(
        default_factory=dict,
        description="Running scenario executions per transport",
    )


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    state = request.app.state
    dispatchers = getattr(state, "dispatchers", {})
    return HealthResponse(
        status="healthy",
        message="Simulator running" if state.settings.simulator.enabled else "Simulator disabled",
        scenarios=len(state.registry),
        active_executions={name: d.active_executions for name, d in dispatchers.items()},
    )


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)) -> HealthResponse:
    """Check that the execution history database answers."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database health check failed: %s", e)
        return HealthResponse(status="unhealthy", message=f"Database error: {e}")
    return HealthResponse(status="healthy", message="Database connection OK")
