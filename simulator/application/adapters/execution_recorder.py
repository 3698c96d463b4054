"""
Database execution recorder.

Persists scenario lifecycle events emitted by the executor. Each event uses
its own session and transaction because executions outlive the request
that started them.

Dependencies: sqlalchemy, simulator.application.services
System role: Execution history adapter for the scenario engine
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from simulator.application.services.execution_service import ExecutionService
from simulator.boundary.db.models.message_model import MessageDirection
from simulator.core.message import Message

logger = logging.getLogger(__name__)


class DatabaseExecutionRecorder:
    """ExecutionRecorder storing executions and messages in the database."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """
        Initialize recorder.

        Args:
            session_factory: Async session factory
        """
        self.session_factory = session_factory

    async def execution_started(self, scenario_name: str, parameters: dict[str, str]) -> UUID:
        async with self.session_factory() as db:
            execution_id = await ExecutionService(db).start_execution(scenario_name, parameters)
            await db.commit()
        return execution_id

    async def execution_succeeded(self, execution_id: UUID) -> None:
        async with self.session_factory() as db:
            await ExecutionService(db).complete_execution(execution_id)
            await db.commit()

    async def execution_failed(self, execution_id: UUID, error: str) -> None:
        async with self.session_factory() as db:
            await ExecutionService(db).fail_execution(execution_id, error)
            await db.commit()

    async def message_exchanged(self, execution_id: UUID, direction: str, message: Message) -> None:
        async with self.session_factory() as db:
            await ExecutionService(db).add_message(
                execution_id, MessageDirection(direction), message
            )
            await db.commit()
        logger.debug("Recorded %s message for execution %s", direction, execution_id)
