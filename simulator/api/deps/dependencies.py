"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived components are built
in the application lifespan and kept on app.state.

Dependencies: simulator.configs, simulator.application, simulator.boundary
System role: DI container for service injection
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from simulator.application.services import ExecutionService, ScenarioService
from simulator.boundary.db import get_async_db
from simulator.configs import Settings
from simulator.core.dispatcher import ScenarioDispatcher
from simulator.core.registry import ScenarioRegistry


def get_settings_dependency(request: Request) -> Settings:
    """
    FastAPI dependency for the settings the application was created with.

    Returns:
        Settings: Application settings
    """
    return request.app.state.settings


def get_registry(request: Request) -> ScenarioRegistry:
    """Get the scenario registry of the running application."""
    return request.app.state.registry


def get_dispatcher(transport: str):
    """
    Build a dependency returning the dispatcher of a transport.

    Args:
        transport: rest, ws, jms or launcher

    Returns:
        Callable usable with Depends()
    """

    def dependency(request: Request) -> ScenarioDispatcher:
        return request.app.state.dispatchers[transport]

    dependency.__name__ = f"get_{transport}_dispatcher"
    return dependency


def get_execution_service(db: AsyncSession = Depends(get_async_db)) -> ExecutionService:
    """
    Get ExecutionService instance with injected dependencies.

    Args:
        db: Database session from dependency injection

    Returns:
        ExecutionService: Configured execution service
    """
    return ExecutionService(db=db)


def get_scenario_service(
    registry: ScenarioRegistry = Depends(get_registry),
    dispatcher: ScenarioDispatcher = Depends(get_dispatcher("launcher")),
) -> ScenarioService:
    """
    Get ScenarioService instance with injected dependencies.

    Returns:
        ScenarioService: Service launching scenarios through the launcher dispatcher
    """
    return ScenarioService(registry=registry, dispatcher=dispatcher)
