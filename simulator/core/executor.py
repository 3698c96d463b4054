"""
Scenario executor.

Plays the steps of a scenario against its endpoint: receives and validates
inbound messages, generates outbound messages, and records the execution.

Dependencies: asyncio (stdlib), simulator.core
System role: Scenario step interpreter
"""

import asyncio
import logging
import uuid
from typing import Any, Protocol

from simulator.core.dictionary import XmlDataDictionary
from simulator.core.endpoint import ScenarioEndpoint
from simulator.core.exceptions import ScenarioExecutionError, SimulatorException
from simulator.core.message import Message
from simulator.core.registry import ScenarioRegistry
from simulator.core.scenario import (
    EchoStep,
    FailStep,
    ReceiveStep,
    SendStep,
    SleepStep,
    VariableStep,
)
from simulator.core.templates import TemplateLoader
from simulator.core.validation import MessageValidator
from simulator.core.variables import ScenarioContext
from simulator.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

INBOUND = "inbound"
OUTBOUND = "outbound"


class ExecutionRecorder(Protocol):
    """Receives execution lifecycle events for history tracking."""

    async def execution_started(self, scenario_name: str, parameters: dict[str, str]) -> uuid.UUID:
        ...

    async def execution_succeeded(self, execution_id: uuid.UUID) -> None:
        ...

    async def execution_failed(self, execution_id: uuid.UUID, error: str) -> None:
        ...

    async def message_exchanged(self, execution_id: uuid.UUID, direction: str, message: Message) -> None:
        ...


class NullExecutionRecorder:
    """Recorder that keeps nothing."""

    async def execution_started(self, scenario_name: str, parameters: dict[str, str]) -> uuid.UUID:
        return uuid.uuid4()

    async def execution_succeeded(self, execution_id: uuid.UUID) -> None:
        return None

    async def execution_failed(self, execution_id: uuid.UUID, error: str) -> None:
        return None

    async def message_exchanged(self, execution_id: uuid.UUID, direction: str, message: Message) -> None:
        return None


class ScenarioExecutor:
    """Interprets scenario steps."""

    def __init__(
        self,
        registry: ScenarioRegistry,
        validator: MessageValidator | None = None,
        templates: TemplateLoader | None = None,
        inbound_dictionary: XmlDataDictionary | None = None,
        outbound_dictionary: XmlDataDictionary | None = None,
        recorder: ExecutionRecorder | None = None,
        default_timeout_ms: int = 5000,
        template_validation: bool = True,
    ) -> None:
        self.registry = registry
        self.validator = validator or MessageValidator()
        self.templates = templates
        self.inbound_dictionary = inbound_dictionary or XmlDataDictionary(name="inbound")
        self.outbound_dictionary = outbound_dictionary or XmlDataDictionary(name="outbound")
        self.recorder = recorder or NullExecutionRecorder()
        self.default_timeout_ms = default_timeout_ms
        self.template_validation = template_validation

    async def start(self, scenario_name: str, parameters: dict[str, Any] | None = None) -> uuid.UUID:
        """Record the start of an execution and return its id."""
        values = {name: str(value) for name, value in (parameters or {}).items()}
        return await self.recorder.execution_started(scenario_name, values)

    async def run(
        self,
        scenario_name: str,
        endpoint: ScenarioEndpoint,
        parameters: dict[str, Any] | None = None,
        execution_id: uuid.UUID | None = None,
    ) -> ScenarioContext:
        """
        Execute a registered scenario.

        Args:
            scenario_name: Registered scenario name
            endpoint: Channel the scenario receives from and sends to
            parameters: Initial variables (starter parameter values)
            execution_id: Id from start(); a new execution is recorded when None

        Returns:
            ScenarioContext: Final variable state

        Raises:
            SimulatorException: Any step failure, after it has been recorded
        """
        scenario_cls = self.registry.get(scenario_name)
        if execution_id is None:
            execution_id = await self.start(scenario_name, parameters)

        context = ScenarioContext(parameters)
        logger.info("Starting scenario %s (execution %s)", scenario_name, execution_id)
        try:
            designer = scenario_cls().design()
            for step in designer.steps:
                await self._execute_step(step, endpoint, context, execution_id)
        except asyncio.CancelledError:
            await self.recorder.execution_failed(execution_id, "Scenario execution cancelled")
            raise
        except SimulatorException as e:
            log_exception_with_context(
                logger, f"Scenario {scenario_name} failed", e, execution_id=execution_id
            )
            await self.recorder.execution_failed(execution_id, str(e))
            raise
        except Exception as e:
            log_exception_with_context(
                logger, f"Scenario {scenario_name} failed unexpectedly", e, execution_id=execution_id
            )
            await self.recorder.execution_failed(execution_id, f"{type(e).__name__}: {e}")
            raise ScenarioExecutionError(str(e), scenario=scenario_name) from e
        finally:
            endpoint.cancel_pending()

        await self.recorder.execution_succeeded(execution_id)
        logger.info("Scenario %s finished successfully", scenario_name)
        return context

    async def _execute_step(
        self,
        step,
        endpoint: ScenarioEndpoint,
        context: ScenarioContext,
        execution_id: uuid.UUID,
    ) -> None:
        if isinstance(step, EchoStep):
            logger.info(context.replace(step.text))
        elif isinstance(step, VariableStep):
            context.set_variable(step.name, step.value)
        elif isinstance(step, SleepStep):
            await asyncio.sleep(step.milliseconds / 1000)
        elif isinstance(step, FailStep):
            raise ScenarioExecutionError(context.replace(step.message), scenario=endpoint.name)
        elif isinstance(step, ReceiveStep):
            await self._receive(step, endpoint, context, execution_id)
        elif isinstance(step, SendStep):
            await self._send(step, endpoint, context, execution_id)
        else:
            raise ScenarioExecutionError(f"Unsupported step {type(step).__name__}")

    def _payload(self, payload: str | None, template_name: str | None) -> str | None:
        if template_name is not None:
            if self.templates is None:
                raise ScenarioExecutionError(f"No template loader configured for '{template_name}'")
            return self.templates.load(template_name)
        return payload

    async def _receive(
        self,
        step: ReceiveStep,
        endpoint: ScenarioEndpoint,
        context: ScenarioContext,
        execution_id: uuid.UUID,
    ) -> Message:
        timeout = step.timeout_ms if step.timeout_ms is not None else self.default_timeout_ms
        received = await endpoint.receive(timeout)
        received.payload = self.inbound_dictionary.translate(received.payload, context)
        await self.recorder.message_exchanged(execution_id, INBOUND, received)

        for header, variable in step.header_extractions.items():
            value = received.header(header)
            if value is not None:
                context.set_variable(variable, value, resolve=False)

        expected = Message(
            payload=self._payload(step.expected_payload, step.template_name) or "",
            headers=step.expected_headers,
        )
        self.validator.validate(
            expected,
            received,
            context,
            validate_payload=self.template_validation and step.validation_enabled,
        )
        return received

    async def _send(
        self,
        step: SendStep,
        endpoint: ScenarioEndpoint,
        context: ScenarioContext,
        execution_id: uuid.UUID,
    ) -> Message:
        payload = context.replace(self._payload(step.message_payload, step.template_name))
        payload = self.outbound_dictionary.translate(payload, context)
        message = Message(
            payload=payload,
            headers={name: context.replace(value) for name, value in step.message_headers.items()},
            status_code=step.status_code,
        )
        destination = context.replace(step.destination_name) if step.destination_name else None
        await endpoint.send(message, destination)
        await self.recorder.message_exchanged(execution_id, OUTBOUND, message)
        return message
