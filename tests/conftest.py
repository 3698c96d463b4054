"""
Shared test fixtures and configuration for entire test suite.

Provides: Scenario registries, engine components, in-memory database sessions
Dependencies: pytest, pytest-asyncio, sqlalchemy
System role: Test infrastructure and fixture management
"""

import uuid

import pytest

from simulator.core.endpoint import RecordingOutboundChannel
from simulator.core.executor import ScenarioExecutor
from simulator.core.message import Message
from simulator.core.registry import ScenarioRegistry
from simulator.core.variables import ScenarioContext


class InMemoryRecorder:
    """ExecutionRecorder keeping events in lists for assertions."""

    def __init__(self) -> None:
        self.started: list[tuple[uuid.UUID, str, dict]] = []
        self.succeeded: list[uuid.UUID] = []
        self.failed: list[tuple[uuid.UUID, str]] = []
        self.messages: list[tuple[uuid.UUID, str, Message]] = []

    async def execution_started(self, scenario_name: str, parameters: dict[str, str]) -> uuid.UUID:
        execution_id = uuid.uuid4()
        self.started.append((execution_id, scenario_name, parameters))
        return execution_id

    async def execution_succeeded(self, execution_id: uuid.UUID) -> None:
        self.succeeded.append(execution_id)

    async def execution_failed(self, execution_id: uuid.UUID, error: str) -> None:
        self.failed.append((execution_id, error))

    async def message_exchanged(self, execution_id: uuid.UUID, direction: str, message: Message) -> None:
        self.messages.append((execution_id, direction, message))


@pytest.fixture
def registry() -> ScenarioRegistry:
    """Provide an empty scenario registry."""
    return ScenarioRegistry()


@pytest.fixture
def context() -> ScenarioContext:
    """Provide an empty scenario context."""
    return ScenarioContext()


@pytest.fixture
def recorder() -> InMemoryRecorder:
    """Provide an in-memory execution recorder."""
    return InMemoryRecorder()


@pytest.fixture
def outbound() -> RecordingOutboundChannel:
    """Provide an outbound channel recording sent messages."""
    return RecordingOutboundChannel()


@pytest.fixture
def executor(registry: ScenarioRegistry, recorder: InMemoryRecorder) -> ScenarioExecutor:
    """Provide an executor with short timeouts over the test registry."""
    return ScenarioExecutor(registry, recorder=recorder, default_timeout_ms=500)


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from simulator.boundary.db import models  # noqa: F401
    from simulator.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    await engine.dispose()
