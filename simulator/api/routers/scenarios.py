"""
Scenario API endpoints.

Routes: GET /scenarios, GET /scenarios/{name}/parameters,
POST /scenarios/{name}/launch

Dependencies: simulator.application.services.scenario_service, simulator.models
System role: Scenario catalogue and launch HTTP API
"""

from fastapi import APIRouter, Depends, status

from simulator.api.deps import get_scenario_service
from simulator.api.routers.error_handling import handle_simulator_errors
from simulator.application.services.scenario_service import ScenarioService
from simulator.models.scenario import (
    LaunchRequest,
    LaunchResponse,
    ScenarioInfo,
    ScenarioParameterSchema,
)

router = APIRouter(prefix="/scenarios", tags=["scenarios"])


@router.get("", response_model=list[ScenarioInfo])
@handle_simulator_errors
async def list_scenarios(
    scenario_service: ScenarioService = Depends(get_scenario_service),
) -> list[ScenarioInfo]:
    """
    List registered scenarios and starters.

    Returns:
        list[ScenarioInfo]: Scenarios sorted by name
    """
    return [ScenarioInfo(**item) for item in scenario_service.list_scenarios()]


@router.get("/{name}/parameters", response_model=list[ScenarioParameterSchema])
@handle_simulator_errors
async def get_scenario_parameters(
    name: str,
    scenario_service: ScenarioService = Depends(get_scenario_service),
) -> list[ScenarioParameterSchema]:
    """
    Get the launch parameters of a scenario.

    Raises:
        HTTPException(404): Scenario not registered
    """
    return [ScenarioParameterSchema(**item) for item in scenario_service.get_parameters(name)]


@router.post(
    "/{name}/launch",
    response_model=LaunchResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
@handle_simulator_errors
async def launch_scenario(
    name: str,
    launch_request: LaunchRequest | None = None,
    scenario_service: ScenarioService = Depends(get_scenario_service),
) -> LaunchResponse:
    """
    Launch a scenario in the background.

    The execution runs asynchronously; poll GET /executions/{id} for its
    outcome.

    Args:
        name: Scenario name
        launch_request: Optional parameter values

    Raises:
        HTTPException(404): Scenario not registered
    """
    parameters = launch_request.parameters if launch_request else {}
    execution_id = await scenario_service.launch(name, parameters)
    return LaunchResponse(execution_id=execution_id, scenario_name=name)
