"""
Exception hierarchy for the service simulator.

Provides layered exception structure for scenario engine errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class SimulatorException(Exception):
    """Base exception for all simulator errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ScenarioNotFoundError(SimulatorException):
    """Raised when no scenario is registered under a name."""

    def __init__(self, name: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize scenario not found error.

        Args:
            name: Requested scenario name
            details: Additional context
        """
        details = details or {}
        details["scenario"] = name
        self.name = name
        super().__init__(f"Scenario not found: {name}", details)


class DuplicateScenarioError(SimulatorException):
    """Raised when a second scenario class is registered under a taken name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Scenario already registered: {name}", {"scenario": name})


class MessageValidationError(SimulatorException):
    """Raised when a received message does not match the expected message."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        expected: Any = None,
        actual: Any = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            path: Element or key path of the mismatch
            expected: Expected value
            actual: Received value
        """
        details: dict[str, Any] = {}
        if path:
            details["path"] = path
        if expected is not None:
            details["expected"] = expected
        if actual is not None:
            details["actual"] = actual
        self.path = path
        super().__init__(message, details)


class ScenarioTimeoutError(SimulatorException):
    """Raised when a scenario waits too long for an inbound message."""

    def __init__(self, timeout_ms: int, endpoint: str | None = None) -> None:
        details: dict[str, Any] = {"timeout_ms": timeout_ms}
        if endpoint:
            details["endpoint"] = endpoint
        super().__init__(
            f"Action timeout after {timeout_ms} ms while receiving message",
            details,
        )


class ScenarioExecutionError(SimulatorException):
    """Raised when a scenario step fails outside of message validation."""

    def __init__(
        self,
        message: str,
        scenario: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if scenario:
            details["scenario"] = scenario
        super().__init__(message, details)


class UnknownVariableError(SimulatorException):
    """Raised when a payload references an undefined variable."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown variable '{name}'", {"variable": name})


class UnknownFunctionError(SimulatorException):
    """Raised when a payload calls an unknown function."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown function '{name}'", {"function": name})


class TemplateNotFoundError(SimulatorException):
    """Raised when a payload template cannot be loaded."""

    def __init__(self, name: str, path: str | None = None) -> None:
        details: dict[str, Any] = {"template": name}
        if path:
            details["path"] = path
        super().__init__(f"Template not found: {name}", details)


class MappingError(SimulatorException):
    """Raised when a scenario mapper cannot read the inbound message."""

    def __init__(self, message: str, strategy: str | None = None) -> None:
        details = {"strategy": strategy} if strategy else None
        super().__init__(message, details)


class SoapEnvelopeError(SimulatorException):
    """Raised when an inbound SOAP envelope is malformed."""

    pass


class OpenApiError(SimulatorException):
    """Raised when an OpenAPI document cannot be turned into scenarios."""

    def __init__(self, message: str, source: str | None = None) -> None:
        details = {"source": source} if source else None
        super().__init__(message, details)
