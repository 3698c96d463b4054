"""
Test suite for ScenarioExecutor.

Tests step interpretation against a ScenarioEndpoint, execution recording,
templates, data dictionaries and failure handling.

System role: Verification of the scenario step interpreter
"""

from pathlib import Path

import pytest

from simulator.core.dictionary import XmlDataDictionary
from simulator.core.endpoint import RecordingOutboundChannel, ScenarioEndpoint
from simulator.core.exceptions import (
    MessageValidationError,
    ScenarioExecutionError,
    ScenarioTimeoutError,
)
from simulator.core.executor import INBOUND, OUTBOUND, ScenarioExecutor
from simulator.core.message import Message
from simulator.core.registry import ScenarioRegistry
from simulator.core.scenario import Scenario, ScenarioDesigner
from simulator.core.templates import TemplateLoader


class EchoNameScenario(Scenario):
    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().payload("<Hello>@variable('name')@</Hello>").extract_header("X-Request-Id", "requestId")
        scenario.variable("greeting", "Hi ${name}")
        scenario.send().header("X-Request-Id", "${requestId}").payload("<Reply>${greeting}</Reply>")


class FailingScenario(Scenario):
    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.fail("Broken for ${who}")


class CrashingScenario(Scenario):
    def run(self, scenario: ScenarioDesigner) -> None:
        raise RuntimeError("design error")


class StatusScenario(Scenario):
    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.send().destination("Fax.Status").payload("<Status>${status}</Status>")


class TemplateScenario(Scenario):
    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().template("request.xml")
        scenario.send().template("response.xml").status(201)


@pytest.fixture
def populated_registry(registry: ScenarioRegistry) -> ScenarioRegistry:
    """Provide a registry with the executor test scenarios."""
    registry.register("EchoName", EchoNameScenario)
    registry.register("Failing", FailingScenario)
    registry.register("Crashing", CrashingScenario)
    registry.register("Status", StatusScenario)
    registry.register("Template", TemplateScenario)
    return registry


class TestScenarioExecutorRun:
    """Test suite for ScenarioExecutor.run()."""

    @pytest.mark.asyncio
    async def test_run_should_reply_and_record_exchange(
        self, populated_registry, executor: ScenarioExecutor, recorder
    ) -> None:
        endpoint = ScenarioEndpoint("EchoName")
        reply = endpoint.deliver(Message(payload="<Hello>Sam</Hello>", headers={"X-Request-Id": "r-1"}))

        context = await executor.run("EchoName", endpoint)

        assert reply.result().payload == "<Reply>Hi Sam</Reply>"
        assert reply.result().header("x-request-id") == "r-1"
        assert context.get_variable("name") == "Sam"
        execution_id = recorder.started[0][0]
        assert recorder.succeeded == [execution_id]
        assert [direction for _, direction, _ in recorder.messages] == [INBOUND, OUTBOUND]

    @pytest.mark.asyncio
    async def test_received_values_should_not_be_evaluated(
        self, populated_registry, executor: ScenarioExecutor, recorder
    ) -> None:
        endpoint = ScenarioEndpoint("EchoName")
        reply = endpoint.deliver(
            Message(payload="<Hello>price ${total}</Hello>", headers={"X-Request-Id": "sim:upperCase('abc')"})
        )

        context = await executor.run("EchoName", endpoint)

        assert context.get_variable("name") == "price ${total}"
        assert context.get_variable("requestId") == "sim:upperCase('abc')"
        assert reply.result().payload == "<Reply>Hi price ${total}</Reply>"
        assert reply.result().header("x-request-id") == "sim:upperCase('abc')"
        assert recorder.failed == []

    @pytest.mark.asyncio
    async def test_validation_failure_should_be_recorded_and_raised(
        self, populated_registry, executor: ScenarioExecutor, recorder
    ) -> None:
        endpoint = ScenarioEndpoint("EchoName")
        reply = endpoint.deliver(Message(payload="<Goodbye>Sam</Goodbye>"))

        with pytest.raises(MessageValidationError):
            await executor.run("EchoName", endpoint)

        assert len(recorder.failed) == 1
        assert recorder.succeeded == []
        assert reply.cancelled()

    @pytest.mark.asyncio
    async def test_template_step_without_loader_should_fail(
        self, populated_registry, executor: ScenarioExecutor
    ) -> None:
        endpoint = ScenarioEndpoint("Template")
        endpoint.deliver(Message(payload="<Anything/>"))

        with pytest.raises(ScenarioExecutionError, match="No template loader"):
            await executor.run("Template", endpoint)

    @pytest.mark.asyncio
    async def test_fail_step_should_raise_with_resolved_message(
        self, populated_registry, executor: ScenarioExecutor, recorder
    ) -> None:
        with pytest.raises(ScenarioExecutionError, match="Broken for Bob"):
            await executor.run("Failing", ScenarioEndpoint("Failing"), {"who": "Bob"})

        assert "Broken for Bob" in recorder.failed[0][1]

    @pytest.mark.asyncio
    async def test_unexpected_error_should_be_wrapped(
        self, populated_registry, executor: ScenarioExecutor, recorder
    ) -> None:
        with pytest.raises(ScenarioExecutionError) as exc_info:
            await executor.run("Crashing", ScenarioEndpoint("Crashing"))

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert recorder.failed[0][1] == "RuntimeError: design error"

    @pytest.mark.asyncio
    async def test_receive_timeout_should_fail_execution(
        self, populated_registry, executor: ScenarioExecutor, recorder
    ) -> None:
        executor.default_timeout_ms = 10

        with pytest.raises(ScenarioTimeoutError):
            await executor.run("EchoName", ScenarioEndpoint("EchoName"))

        assert len(recorder.failed) == 1

    @pytest.mark.asyncio
    async def test_start_then_run_should_reuse_execution_id(
        self, populated_registry, executor: ScenarioExecutor, recorder
    ) -> None:
        outbound = RecordingOutboundChannel()
        execution_id = await executor.start("Status", {"status": "SUCCESS"})

        await executor.run("Status", ScenarioEndpoint("Status", outbound=outbound), {"status": "SUCCESS"}, execution_id)

        assert len(recorder.started) == 1
        assert recorder.succeeded == [execution_id]
        assert outbound.for_destination("Fax.Status")[0].payload == "<Status>SUCCESS</Status>"


class TestTemplatesAndDictionaries:
    """Test suite for template payloads and data dictionaries."""

    @pytest.mark.asyncio
    async def test_templates_should_be_used_for_both_directions(
        self, populated_registry, recorder, tmp_path: Path
    ) -> None:
        (tmp_path / "request.xml").write_text("<Order><id>@ignore@</id></Order>", encoding="utf-8")
        (tmp_path / "response.xml").write_text("<Created>sim:upperCase('ok')</Created>", encoding="utf-8")
        executor = ScenarioExecutor(populated_registry, templates=TemplateLoader(tmp_path), recorder=recorder)
        endpoint = ScenarioEndpoint("Template")
        reply = endpoint.deliver(Message(payload="<Order><id>3</id></Order>"))

        await executor.run("Template", endpoint)

        assert reply.result().payload == "<Created>OK</Created>"
        assert reply.result().status_code == 201

    @pytest.mark.asyncio
    async def test_dictionaries_should_translate_messages(self, populated_registry, recorder) -> None:
        executor = ScenarioExecutor(
            populated_registry,
            recorder=recorder,
            inbound_dictionary=XmlDataDictionary({"Hello": "Normalized"}),
            outbound_dictionary=XmlDataDictionary({"Reply": "Translated"}),
        )
        endpoint = ScenarioEndpoint("EchoName")
        reply = endpoint.deliver(Message(payload="<Hello>Sam</Hello>", headers={"X-Request-Id": "r-2"}))

        context = await executor.run("EchoName", endpoint)

        assert context.get_variable("name") == "Normalized"
        assert reply.result().payload == "<Reply>Translated</Reply>"
