"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), create_tables(), get_async_db()
  - ScenarioExecutionModel, ScenarioMessageModel: Execution history entities
  - ExecutionStatus, MessageDirection: Enum types
  - execution_crud, message_crud: CRUD operation singletons

Dependencies: sqlalchemy, simulator.configs
System role: Persistent storage for scenario execution history
"""

from simulator.boundary.db.base import Base, TimestampMixin, UUIDMixin
from simulator.boundary.db.connection import (
    create_tables,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from simulator.boundary.db.models import (
    ExecutionStatus,
    MessageDirection,
    ScenarioExecutionModel,
    ScenarioMessageModel,
)
from simulator.boundary.db.CRUD import (
    BaseCRUD,
    ExecutionCRUD,
    MessageCRUD,
    execution_crud,
    message_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "create_tables",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "ExecutionStatus",
    "MessageDirection",
    "ScenarioExecutionModel",
    "ScenarioMessageModel",
    "BaseCRUD",
    "ExecutionCRUD",
    "MessageCRUD",
    "execution_crud",
    "message_crud",
]
