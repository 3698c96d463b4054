"""API-specific dependencies."""

from .dependencies import (
    get_dispatcher,
    get_execution_service,
    get_registry,
    get_scenario_service,
    get_settings_dependency,
)

__all__ = [
    "get_dispatcher",
    "get_execution_service",
    "get_registry",
    "get_scenario_service",
    "get_settings_dependency",
]
