"""
Execution history schemas.

Dependencies: pydantic
System role: Execution API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Message exchanged during an execution."""

    id: uuid.UUID
    direction: str
    payload: str
    headers: dict[str, str]
    status_code: int | None
    created_at: datetime


class ExecutionResponse(BaseModel):
    """Execution summary."""

    id: uuid.UUID
    scenario_name: str
    status: str
    parameters: dict[str, str]
    error_message: str | None
    start_date: datetime
    end_date: datetime | None


class ExecutionDetailResponse(ExecutionResponse):
    """Execution with its message log."""

    messages: list[MessageResponse] = Field(default_factory=list)


class ClearExecutionsResponse(BaseModel):
    deleted: int
