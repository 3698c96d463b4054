"""Adapters between the scenario engine and the boundary."""

from .execution_recorder import DatabaseExecutionRecorder

__all__ = ["DatabaseExecutionRecorder"]
