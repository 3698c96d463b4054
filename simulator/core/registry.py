"""
Scenario registry.

Keeps scenario classes by name and provides the @scenario, @starter and
@request_mapping decorators that register them.

Dependencies: importlib (stdlib)
System role: Lookup table between mapping keys and scenario classes
"""

import importlib
import logging
from typing import Callable, Iterable, TypeVar

from simulator.core.exceptions import DuplicateScenarioError, ScenarioNotFoundError
from simulator.core.scenario import RequestMapping, Scenario

logger = logging.getLogger(__name__)

ScenarioT = TypeVar("ScenarioT", bound=type[Scenario])


class ScenarioRegistry:
    """Scenario classes indexed by name, in registration order."""

    def __init__(self) -> None:
        self._scenarios: dict[str, type[Scenario]] = {}
        self._starters: set[str] = set()

    def register(
        self,
        name: str,
        scenario_cls: type[Scenario],
        starter: bool | None = None,
    ) -> type[Scenario]:
        """
        Register a scenario class under a name.

        Args:
            name: Scenario name used as mapping key
            scenario_cls: Scenario subclass
            starter: Starter flag for this registration; the class default when None

        Returns:
            type[Scenario]: The registered class

        Raises:
            DuplicateScenarioError: If another class already uses the name
        """
        if not name:
            raise ValueError("Scenario name must not be empty")

        existing = self._scenarios.get(name)
        if existing is not None and existing is not scenario_cls:
            raise DuplicateScenarioError(name)

        if "name" not in vars(scenario_cls):
            scenario_cls.name = name
        self._scenarios[name] = scenario_cls
        is_starter = scenario_cls.is_starter if starter is None else starter
        if is_starter:
            self._starters.add(name)
        else:
            self._starters.discard(name)
        logger.debug("Registered scenario %s (%s)", name, scenario_cls.__name__)
        return scenario_cls

    def unregister(self, name: str) -> None:
        self._scenarios.pop(name, None)
        self._starters.discard(name)

    def get(self, name: str) -> type[Scenario]:
        """
        Get a scenario class by name.

        Raises:
            ScenarioNotFoundError: If no scenario uses the name
        """
        try:
            return self._scenarios[name]
        except KeyError:
            raise ScenarioNotFoundError(name) from None

    def contains(self, name: str | None) -> bool:
        return name is not None and name in self._scenarios

    def names(self) -> list[str]:
        return list(self._scenarios)

    def is_starter(self, name: str) -> bool:
        return name in self._starters

    def items(self) -> list[tuple[str, type[Scenario]]]:
        """(name, class) pairs of registered scenarios that are not starters."""
        return [(name, cls) for name, cls in self._scenarios.items() if name not in self._starters]

    def scenarios(self) -> list[type[Scenario]]:
        """Registered classes that are not starters."""
        return [cls for _, cls in self.items()]

    def starters(self) -> list[type[Scenario]]:
        return [cls for name, cls in self._scenarios.items() if name in self._starters]

    def clear(self) -> None:
        self._scenarios.clear()
        self._starters.clear()

    def __len__(self) -> int:
        return len(self._scenarios)

    def __contains__(self, name: object) -> bool:
        return name in self._scenarios


default_registry = ScenarioRegistry()


def scenario(name: str, registry: ScenarioRegistry | None = None) -> Callable[[ScenarioT], ScenarioT]:
    """Class decorator registering a scenario under a name."""

    def decorator(cls: ScenarioT) -> ScenarioT:
        (registry if registry is not None else default_registry).register(name, cls)
        return cls

    return decorator


def starter(name: str, registry: ScenarioRegistry | None = None) -> Callable[[ScenarioT], ScenarioT]:
    """Class decorator registering a starter under a name."""

    def decorator(cls: ScenarioT) -> ScenarioT:
        cls.is_starter = True
        (registry if registry is not None else default_registry).register(name, cls, starter=True)
        return cls

    return decorator


def request_mapping(path: str, method: str | None = None) -> Callable[[ScenarioT], ScenarioT]:
    """
    Class decorator adding an HTTP request mapping to a scenario.

    Can be stacked to map several paths.
    """

    def decorator(cls: ScenarioT) -> ScenarioT:
        mapping = RequestMapping(path=path, method=method.upper() if method else None)
        cls.request_mappings = tuple(cls.request_mappings) + (mapping,)
        return cls

    return decorator


def load_scenario_modules(modules: Iterable[str]) -> list[str]:
    """
    Import modules so their decorators register scenarios.

    Args:
        modules: Dotted module names

    Returns:
        list[str]: Imported module names
    """
    loaded = []
    for module in modules:
        importlib.import_module(module)
        loaded.append(module)
        logger.info("Loaded scenario module %s", module)
    return loaded
