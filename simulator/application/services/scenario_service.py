"""
Scenario service orchestrator.

Catalogue of registered scenarios and starters, and manual launches.

Dependencies: simulator.core
System role: Scenario catalogue use cases
"""

from uuid import UUID

from simulator.core.dispatcher import ScenarioDispatcher
from simulator.core.registry import ScenarioRegistry


class ScenarioService:
    """Scenario catalogue orchestrator."""

    def __init__(self, registry: ScenarioRegistry, dispatcher: ScenarioDispatcher) -> None:
        """
        Initialize scenario service.

        Args:
            registry: Registered scenarios
            dispatcher: Dispatcher used to launch executions
        """
        self.registry = registry
        self.dispatcher = dispatcher

    def list_scenarios(self) -> list[dict]:
        """
        List registered scenarios and starters.

        Returns:
            list[dict]: name, type (scenario or starter), request mappings and description
        """
        items = []
        for name in self.registry.names():
            scenario_cls = self.registry.get(name)
            items.append({
                "name": name,
                "type": "starter" if self.registry.is_starter(name) else "scenario",
                "request_mappings": [
                    {"method": m.method, "path": m.path} for m in scenario_cls.request_mappings
                ],
                "description": (scenario_cls.__doc__ or "").strip() or None,
            })
        return items

    def get_parameters(self, name: str) -> list[dict]:
        """
        Get the launch parameters of a scenario.

        Raises:
            ScenarioNotFoundError: If the scenario is not registered
        """
        scenario_cls = self.registry.get(name)
        return [p.to_dict() for p in scenario_cls().parameters()]

    async def launch(self, name: str, parameters: dict[str, str] | None = None) -> UUID:
        """
        Launch a scenario in the background.

        Raises:
            ScenarioNotFoundError: If the scenario is not registered
        """
        return await self.dispatcher.launch(name, parameters)
