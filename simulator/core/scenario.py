"""
Scenario model.

Scenario base class, scenario parameters and the designer that records a
scenario's ordered steps.

Usage:
    @scenario("Hello")
    @request_mapping("/hello", method="POST")
    class HelloScenario(Scenario):
        def run(self, scenario: ScenarioDesigner) -> None:
            scenario.receive().payload("<Hello>@ignore@</Hello>")
            scenario.send().payload("<HelloResponse>Hi</HelloResponse>")

Dependencies: dataclasses, enum (stdlib)
System role: Scripted interaction definitions played by the executor
"""

import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar


class ControlType(str, enum.Enum):
    """Input control used to edit a scenario parameter in a user interface."""

    TEXT = "text"
    TEXTAREA = "textarea"
    DROPDOWN = "dropdown"


@dataclass
class ScenarioParameter:
    """Named input of a starter, exposed to callers before launch."""

    name: str
    label: str | None = None
    control_type: ControlType = ControlType.TEXT
    value: str = ""
    options: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.label is None:
            self.label = self.name
        if self.control_type is ControlType.DROPDOWN and self.options and not self.value:
            self.value = self.options[0]

    def as_variable(self) -> tuple[str, str]:
        return self.name, self.value

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "label": self.label,
            "control_type": self.control_type.value,
            "value": self.value,
            "options": list(self.options),
        }


@dataclass(frozen=True)
class RequestMapping:
    """HTTP method and path template a scenario answers to."""

    path: str
    method: str | None = None


# Steps


@dataclass
class EchoStep:
    text: str


@dataclass
class VariableStep:
    name: str
    value: Any


@dataclass
class SleepStep:
    milliseconds: int


@dataclass
class FailStep:
    message: str


@dataclass
class ReceiveStep:
    """Waits for the next inbound message and validates it."""

    expected_payload: str | None = None
    template_name: str | None = None
    expected_headers: dict[str, str] = field(default_factory=dict)
    header_extractions: dict[str, str] = field(default_factory=dict)
    validation_enabled: bool = True
    timeout_ms: int | None = None

    def payload(self, payload: str) -> "ReceiveStep":
        self.expected_payload = payload
        return self

    def template(self, name: str) -> "ReceiveStep":
        self.template_name = name
        return self

    def header(self, name: str, value: Any) -> "ReceiveStep":
        self.expected_headers[name.lower()] = str(value)
        return self

    def extract_header(self, name: str, variable: str) -> "ReceiveStep":
        """Store the value of a received header in a scenario variable."""
        self.header_extractions[name.lower()] = variable
        return self

    def validate(self, enabled: bool = True) -> "ReceiveStep":
        self.validation_enabled = enabled
        return self

    def timeout(self, milliseconds: int) -> "ReceiveStep":
        self.timeout_ms = milliseconds
        return self


@dataclass
class SendStep:
    """Generates an outbound message: the reply, or a message to a destination."""

    message_payload: str | None = None
    template_name: str | None = None
    message_headers: dict[str, str] = field(default_factory=dict)
    status_code: int | None = None
    destination_name: str | None = None

    def payload(self, payload: str) -> "SendStep":
        self.message_payload = payload
        return self

    def template(self, name: str) -> "SendStep":
        self.template_name = name
        return self

    def header(self, name: str, value: Any) -> "SendStep":
        self.message_headers[name.lower()] = str(value)
        return self

    def content_type(self, value: str) -> "SendStep":
        return self.header("content-type", value)

    def status(self, code: int) -> "SendStep":
        self.status_code = int(code)
        return self

    def destination(self, name: str) -> "SendStep":
        self.destination_name = name
        return self


Step = EchoStep | VariableStep | SleepStep | FailStep | ReceiveStep | SendStep


class ScenarioDesigner:
    """Records the ordered steps of a scenario."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.steps: list[Step] = []

    def _add(self, step):
        self.steps.append(step)
        return step

    def echo(self, text: str) -> EchoStep:
        return self._add(EchoStep(text))

    def variable(self, name: str, value: Any) -> VariableStep:
        return self._add(VariableStep(name, value))

    def receive(self) -> ReceiveStep:
        return self._add(ReceiveStep())

    def send(self) -> SendStep:
        return self._add(SendStep())

    def sleep(self, milliseconds: int) -> SleepStep:
        return self._add(SleepStep(int(milliseconds)))

    def fail(self, message: str) -> FailStep:
        return self._add(FailStep(message))


class Scenario:
    """
    Base class for simulator scenarios.

    Subclasses implement run() to describe their steps. name is the first
    name the class was registered under and only labels logs; registries
    resolve scenarios by their own keys.
    """

    name: ClassVar[str] = ""
    is_starter: ClassVar[bool] = False
    request_mappings: ClassVar[tuple[RequestMapping, ...]] = ()

    def run(self, scenario: ScenarioDesigner) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not define run()")

    def parameters(self) -> list[ScenarioParameter]:
        """Parameters accepted at launch; empty for regular scenarios."""
        return []

    def design(self) -> ScenarioDesigner:
        """Build the scenario's steps with a fresh designer."""
        designer = ScenarioDesigner(self.name or type(self).__name__)
        self.run(designer)
        return designer


class ScenarioStarter(Scenario):
    """Scenario launched manually with parameters instead of by a request."""

    is_starter: ClassVar[bool] = True
