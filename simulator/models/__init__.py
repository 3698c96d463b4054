"""API request/response schemas."""

from .execution import ClearExecutionsResponse, ExecutionDetailResponse, ExecutionResponse, MessageResponse
from .scenario import LaunchRequest, LaunchResponse, ScenarioInfo, ScenarioParameterSchema

__all__ = [
    "ClearExecutionsResponse",
    "ExecutionDetailResponse",
    "ExecutionResponse",
    "LaunchRequest",
    "LaunchResponse",
    "MessageResponse",
    "ScenarioInfo",
    "ScenarioParameterSchema",
]
