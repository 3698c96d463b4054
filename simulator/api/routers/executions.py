"""
Execution history API endpoints.

Routes: GET /executions, GET /executions/{id}, DELETE /executions

Dependencies: simulator.application.services.execution_service, simulator.models
System role: Execution history HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from simulator.api.deps import get_execution_service
from simulator.api.routers.error_handling import handle_simulator_errors
from simulator.application.services.execution_service import ExecutionService
from simulator.boundary.db.models.execution_model import ExecutionStatus
from simulator.models.execution import (
    ClearExecutionsResponse,
    ExecutionDetailResponse,
    ExecutionResponse,
)

router = APIRouter(prefix="/executions", tags=["executions"])


@router.get("", response_model=list[ExecutionResponse])
@handle_simulator_errors
async def list_executions(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    status: ExecutionStatus | None = None,
    scenario_name: str | None = None,
    execution_service: ExecutionService = Depends(get_execution_service),
) -> list[dict]:
    """
    List scenario executions, newest first.

    Args:
        limit: Page size
        offset: Number of executions to skip
        status: Optional status filter (active, success, failed)
        scenario_name: Optional scenario filter
    """
    return await execution_service.list_executions(
        limit=limit,
        offset=offset,
        status=status,
        scenario_name=scenario_name,
    )


@router.get("/{execution_id}", response_model=ExecutionDetailResponse)
@handle_simulator_errors
async def get_execution(
    execution_id: UUID,
    execution_service: ExecutionService = Depends(get_execution_service),
) -> dict:
    """
    Get one execution with the messages it received and sent.

    Raises:
        HTTPException(404): Execution not found

    Example Response:
        {
            "id": "123e4567-e89b-12d3-a456-426614174000",
            "scenario_name": "UpdateFaxStatus",
            "status": "success",
            "parameters": {"ReferenceId": "fax-1", "Status": "SUCCESS"},
            "error_message": null,
            "start_date": "2026-01-01T12:00:00",
            "end_date": "2026-01-01T12:00:01",
            "messages": [...]
        }
    """
    return await execution_service.get_execution(execution_id)


@router.delete("", response_model=ClearExecutionsResponse)
@handle_simulator_errors
async def clear_executions(
    execution_service: ExecutionService = Depends(get_execution_service),
) -> ClearExecutionsResponse:
    """Delete the complete execution history."""
    deleted = await execution_service.clear_executions()
    return ClearExecutionsResponse(deleted=deleted)
