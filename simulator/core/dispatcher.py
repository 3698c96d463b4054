"""
Scenario dispatcher.

Maps an inbound message to a scenario, runs the scenario in the background
and returns its first reply, falling back to the endpoint adapter when no
scenario answers.

Dependencies: asyncio (stdlib), simulator.core
System role: Inbound request dispatch engine shared by all transports
"""

import asyncio
import logging
import uuid
from typing import Any

from simulator.core.endpoint import OutboundChannel, ScenarioEndpoint
from simulator.core.exceptions import (
    MessageValidationError,
    ScenarioNotFoundError,
    SimulatorException,
)
from simulator.core.executor import ScenarioExecutor
from simulator.core.fallback import EndpointAdapter, FallbackReason
from simulator.core.mapping import ScenarioMapper
from simulator.core.message import Message
from simulator.core.registry import ScenarioRegistry
from simulator.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


class ScenarioDispatcher:
    """Routes inbound messages of one transport to scenarios."""

    def __init__(
        self,
        registry: ScenarioRegistry,
        executor: ScenarioExecutor,
        mapper: ScenarioMapper,
        fallback: EndpointAdapter,
        default_scenario: str = "DEFAULT_SCENARIO",
        default_timeout_ms: int = 5000,
        outbound: OutboundChannel | None = None,
        name: str = "simulator",
    ) -> None:
        """
        Initialize dispatcher.

        Args:
            registry: Registered scenarios
            executor: Step interpreter
            mapper: Strategy producing the mapping key
            fallback: Responder used when no scenario answers
            default_scenario: Scenario run when the mapping key is unknown
            default_timeout_ms: Time to wait for the scenario's reply
            outbound: Channel for messages sent to named destinations
            name: Transport name used in logs
        """
        self.registry = registry
        self.executor = executor
        self.mapper = mapper
        self.fallback = fallback
        self.default_scenario = default_scenario
        self.default_timeout_ms = default_timeout_ms
        self.outbound = outbound
        self.name = name
        self._tasks: set[asyncio.Task] = set()

    def resolve_scenario(self, message: Message) -> str | None:
        """
        Select the scenario name for a message.

        Returns:
            str | None: Mapped scenario, default scenario, or None when neither exists
        """
        try:
            key = self.mapper.extract_mapping_key(message)
        except SimulatorException as e:
            logger.warning("Failed to extract mapping key on %s: %s", self.name, e)
            key = None

        if key and self.registry.contains(key) and not self.registry.is_starter(key):
            return key

        if self.registry.contains(self.default_scenario):
            if key:
                logger.info(
                    "No scenario for mapping key '%s' on %s, using default scenario %s",
                    key,
                    self.name,
                    self.default_scenario,
                )
            return self.default_scenario

        logger.warning(
            "No scenario for mapping key '%s' and no default scenario '%s' registered",
            key,
            self.default_scenario,
        )
        return None

    def _track(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Background execution ended with %s", type(task.exception()).__name__)

    def _fallback(self, message: Message, reason: FallbackReason) -> Message | None:
        log_with_context(
            logger,
            logging.WARNING,
            f"Falling back to {type(self.fallback).__name__} on {self.name}: {reason.value}",
            transport=self.name,
            reason=reason.value,
            path=message.path,
        )
        return self.fallback.handle(message, reason)

    async def dispatch(self, message: Message) -> Message | None:
        """
        Dispatch an inbound message to its scenario and await the reply.

        Args:
            message: Inbound message

        Returns:
            Message | None: Scenario reply or fallback response
        """
        scenario_name = self.resolve_scenario(message)
        if scenario_name is None:
            return self._fallback(message, FallbackReason.NO_MATCH)

        endpoint = ScenarioEndpoint(scenario_name, self.executor.default_timeout_ms, self.outbound)
        reply = endpoint.deliver(message)
        task = asyncio.create_task(
            self.executor.run(scenario_name, endpoint),
            name=f"scenario-{scenario_name}-{message.id}",
        )
        self._track(task)

        await asyncio.wait(
            {reply, task},
            timeout=self.default_timeout_ms / 1000,
            return_when=asyncio.FIRST_COMPLETED,
        )

        if reply.done() and not reply.cancelled():
            return reply.result()

        if reply.cancelled() and not task.done():
            # Reply withdrawn by a finished scenario that is still recording its result
            await asyncio.wait({task}, timeout=self.default_timeout_ms / 1000)

        if task.done():
            error = None if task.cancelled() else task.exception()
            if isinstance(error, MessageValidationError):
                return self._fallback(message, FallbackReason.VALIDATION_FAILED)
            if error is not None:
                return self._fallback(message, FallbackReason.SCENARIO_FAILED)
            return self._fallback(message, FallbackReason.NO_RESPONSE)

        reply.cancel()
        return self._fallback(message, FallbackReason.TIMEOUT)

    async def launch(self, scenario_name: str, parameters: dict[str, Any] | None = None) -> uuid.UUID:
        """
        Launch a scenario without inbound message, typically a starter.

        Declared parameter defaults are overridden by the given values.

        Args:
            scenario_name: Registered scenario name
            parameters: Parameter values by name

        Returns:
            uuid.UUID: Execution id

        Raises:
            ScenarioNotFoundError: If the scenario is not registered
        """
        if not self.registry.contains(scenario_name):
            raise ScenarioNotFoundError(scenario_name)

        scenario_cls = self.registry.get(scenario_name)
        values = {p.name: p.value for p in scenario_cls().parameters()}
        values.update({name: str(value) for name, value in (parameters or {}).items()})

        execution_id = await self.executor.start(scenario_name, values)
        endpoint = ScenarioEndpoint(scenario_name, self.executor.default_timeout_ms, self.outbound)
        task = asyncio.create_task(
            self.executor.run(scenario_name, endpoint, values, execution_id),
            name=f"starter-{scenario_name}-{execution_id}",
        )
        self._track(task)
        logger.info("Launched scenario %s (execution %s)", scenario_name, execution_id)
        return execution_id

    @property
    def active_executions(self) -> int:
        return len(self._tasks)

    async def shutdown(self) -> None:
        """Cancel running background executions."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Dispatcher %s stopped %d running executions", self.name, len(tasks))
