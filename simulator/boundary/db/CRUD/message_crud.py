"""
Scenario message CRUD operations.

Dependencies: sqlalchemy, simulator.boundary.db.models
System role: Message log persistence
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from simulator.boundary.db.CRUD.base_crud import BaseCRUD
from simulator.boundary.db.models.message_model import ScenarioMessageModel


class MessageCRUD(BaseCRUD[ScenarioMessageModel]):
    """CRUD operations for ScenarioMessageModel."""

    def __init__(self) -> None:
        super().__init__(ScenarioMessageModel)

    async def get_by_execution(
        self,
        session: AsyncSession,
        execution_id: UUID,
    ) -> Sequence[ScenarioMessageModel]:
        """Retrieve messages of an execution in creation order."""
        stmt = (
            select(ScenarioMessageModel)
            .where(ScenarioMessageModel.execution_id == execution_id)
            .order_by(ScenarioMessageModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


message_crud = MessageCRUD()
