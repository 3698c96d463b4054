"""Service orchestrators."""

from .execution_service import ExecutionService
from .scenario_service import ScenarioService

__all__ = [
    "ExecutionService",
    "ScenarioService",
]
