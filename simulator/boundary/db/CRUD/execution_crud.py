"""
Scenario execution CRUD operations.

Extends BaseCRUD with status transitions and history queries.

Dependencies: sqlalchemy, simulator.boundary.db.models
System role: Execution persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from simulator.boundary.db.base import utc_now
from simulator.boundary.db.CRUD.base_crud import BaseCRUD
from simulator.boundary.db.models.execution_model import ExecutionStatus, ScenarioExecutionModel
from simulator.boundary.db.models.message_model import ScenarioMessageModel


class ExecutionCRUD(BaseCRUD[ScenarioExecutionModel]):
    """CRUD operations for ScenarioExecutionModel."""

    def __init__(self) -> None:
        """Initialize ExecutionCRUD with ScenarioExecutionModel."""
        super().__init__(ScenarioExecutionModel)

    async def get_recent(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
        status: ExecutionStatus | None = None,
        scenario_name: str | None = None,
    ) -> Sequence[ScenarioExecutionModel]:
        """
        Retrieve executions, newest first.

        Args:
            session: Async database session
            limit: Maximum number of executions to return
            offset: Number of executions to skip
            status: Optional status filter
            scenario_name: Optional scenario filter

        Returns:
            Sequence of executions
        """
        stmt = select(ScenarioExecutionModel)
        if status is not None:
            stmt = stmt.where(ScenarioExecutionModel.status == status)
        if scenario_name is not None:
            stmt = stmt.where(ScenarioExecutionModel.scenario_name == scenario_name)
        stmt = stmt.order_by(ScenarioExecutionModel.start_date.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_with_messages(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> ScenarioExecutionModel | None:
        """
        Retrieve an execution with a freshly loaded message log.

        Messages appended in the same session are included because the
        relationship is reloaded even for instances already in the session.
        """
        stmt = (
            select(ScenarioExecutionModel)
            .where(ScenarioExecutionModel.id == id)
            .options(selectinload(ScenarioExecutionModel.messages))
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_success(self, session: AsyncSession, id: UUID) -> ScenarioExecutionModel | None:
        """Mark execution as completed successfully."""
        return await self.update_by_id(
            session, id, status=ExecutionStatus.SUCCESS, end_date=utc_now()
        )

    async def mark_failed(
        self,
        session: AsyncSession,
        id: UUID,
        error_message: str,
    ) -> ScenarioExecutionModel | None:
        """Mark execution as failed with the error reason."""
        return await self.update_by_id(
            session,
            id,
            status=ExecutionStatus.FAILED,
            error_message=error_message,
            end_date=utc_now(),
        )

    async def delete_all(self, session: AsyncSession) -> int:
        """
        Delete all executions and their messages.

        Returns:
            int: Number of deleted executions
        """
        await session.execute(delete(ScenarioMessageModel))
        result = await session.execute(delete(ScenarioExecutionModel))
        return result.rowcount


execution_crud = ExecutionCRUD()
