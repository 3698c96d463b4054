"""ORM models for scenario execution history."""

from simulator.boundary.db.models.execution_model import ExecutionStatus, ScenarioExecutionModel
from simulator.boundary.db.models.message_model import MessageDirection, ScenarioMessageModel

__all__ = [
    "ExecutionStatus",
    "MessageDirection",
    "ScenarioExecutionModel",
    "ScenarioMessageModel",
]
