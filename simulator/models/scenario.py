"""
Scenario schemas.

Request/response schemas for the scenario catalogue and launches.

Dependencies: pydantic
System role: Scenario API contracts
"""

import uuid

from pydantic import BaseModel, Field


class RequestMappingSchema(BaseModel):
    """HTTP method and path a scenario answers to."""

    method: str | None
    path: str


class ScenarioInfo(BaseModel):
    """Registered scenario or starter."""

    name: str
    type: str = Field(..., description="scenario or starter")
    request_mappings: list[RequestMappingSchema] = Field(default_factory=list)
    description: str | None = None


class ScenarioParameterSchema(BaseModel):
    """Launch parameter of a starter."""

    name: str
    label: str
    control_type: str
    value: str
    options: list[str] = Field(default_factory=list)


class LaunchRequest(BaseModel):
    """Request schema for launching a scenario."""

    parameters: dict[str, str] = Field(
        default_factory=dict,
        description="Parameter values by name; declared defaults fill the rest",
    )


class LaunchResponse(BaseModel):
    """Response schema for a launched scenario."""

    execution_id: uuid.UUID
    scenario_name: str
