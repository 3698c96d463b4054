"""
Shared CRUD operations for the execution history models.

Dependencies: sqlalchemy, uuid
System role: Foundation for the model-specific CRUD singletons
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from simulator.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Primary-key operations common to executions and messages.

    Nothing here commits: callers own the transaction, either the request
    scoped session of the admin API or the per-event session of the
    execution recorder.
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """
        Insert a row and flush it so generated ids and defaults are populated.

        Args:
            session: Async database session
            **values: Column values

        Returns:
            The new instance
        """
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        return await session.get(self.model, id)

    async def update_by_id(self, session: AsyncSession, id: UUID, **values) -> ModelT | None:
        """
        Set column values on an existing row.

        Returns:
            The updated instance, None when no row has the id
        """
        instance = await self.get_by_id(session, id)
        if instance is None:
            return None
        for column, value in values.items():
            setattr(instance, column, value)
        await session.flush()
        return instance

    async def count(self, session: AsyncSession) -> int:
        result = await session.execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())
