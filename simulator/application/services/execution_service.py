"""
Execution service orchestrator.

Coordinates scenario execution history: lifecycle transitions, message log
and queries for the admin API.

Dependencies: simulator.boundary.db.CRUD, simulator.boundary.db.models
System role: Execution history orchestration
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from simulator.boundary.db.CRUD.execution_crud import execution_crud
from simulator.boundary.db.CRUD.message_crud import message_crud
from simulator.boundary.db.models.execution_model import ExecutionStatus, ScenarioExecutionModel
from simulator.boundary.db.models.message_model import MessageDirection, ScenarioMessageModel
from simulator.core.message import Message


def _message_to_dict(message: ScenarioMessageModel) -> dict[str, Any]:
    return {
        "id": str(message.id),
        "direction": message.direction.value,
        "payload": message.payload,
        "headers": message.headers,
        "status_code": message.status_code,
        "created_at": message.created_at.isoformat(),
    }


def _execution_to_dict(
    execution: ScenarioExecutionModel,
    include_messages: bool = False,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": str(execution.id),
        "scenario_name": execution.scenario_name,
        "status": execution.status.value,
        "parameters": execution.parameters,
        "error_message": execution.error_message,
        "start_date": execution.start_date.isoformat(),
        "end_date": execution.end_date.isoformat() if execution.end_date else None,
    }
    if include_messages:
        data["messages"] = [_message_to_dict(m) for m in execution.messages]
    return data


class ExecutionService:
    """Execution history orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize execution service.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def start_execution(self, scenario_name: str, parameters: dict[str, str]) -> UUID:
        """
        Record a new ACTIVE execution.

        Args:
            scenario_name: Scenario being executed
            parameters: Launch parameters

        Returns:
            UUID: Created execution ID
        """
        execution = await execution_crud.create(
            self.db,
            scenario_name=scenario_name,
            status=ExecutionStatus.ACTIVE,
            parameters=dict(parameters),
        )
        return execution.id

    async def complete_execution(self, execution_id: UUID) -> None:
        await execution_crud.mark_success(self.db, execution_id)

    async def fail_execution(self, execution_id: UUID, error_message: str) -> None:
        await execution_crud.mark_failed(self.db, execution_id, error_message)

    async def add_message(
        self,
        execution_id: UUID,
        direction: MessageDirection,
        message: Message,
    ) -> UUID:
        """
        Append a message to an execution's log.

        Args:
            execution_id: Execution UUID
            direction: INBOUND or OUTBOUND
            message: Exchanged message

        Returns:
            UUID: Created message ID
        """
        record = await message_crud.create(
            self.db,
            execution_id=execution_id,
            direction=direction,
            payload=message.payload,
            headers=dict(message.headers),
            status_code=message.status_code,
        )
        return record.id

    async def list_executions(
        self,
        limit: int = 100,
        offset: int = 0,
        status: ExecutionStatus | None = None,
        scenario_name: str | None = None,
    ) -> list[dict]:
        """
        List executions, newest first.

        Returns:
            list[dict]: Execution summaries without messages
        """
        executions = await execution_crud.get_recent(
            self.db,
            limit=limit,
            offset=offset,
            status=status,
            scenario_name=scenario_name,
        )
        return [_execution_to_dict(e) for e in executions]

    async def get_execution(self, execution_id: UUID) -> dict:
        """
        Get execution details including its messages.

        Raises:
            ValueError: If execution doesn't exist
        """
        execution = await execution_crud.get_with_messages(self.db, execution_id)
        if not execution:
            raise ValueError(f"Execution {execution_id} does not exist")
        return _execution_to_dict(execution, include_messages=True)

    async def clear_executions(self) -> int:
        """
        Delete the whole execution history.

        Returns:
            int: Number of deleted executions
        """
        return await execution_crud.delete_all(self.db)
