"""
API test fixtures.

Provides: Settings pointing at a temporary database, a populated scenario
registry and a lifespan-enabled TestClient
"""

import time
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from simulator.api.main import create_app
from simulator.configs import Settings
from simulator.configs.database import DatabaseSettings
from simulator.configs.simulator import SimulatorSettings
from simulator.configs.transports import RestSettings, WsSettings
from simulator.core.registry import ScenarioRegistry, request_mapping
from simulator.core.scenario import ControlType, Scenario, ScenarioDesigner, ScenarioParameter, ScenarioStarter


@request_mapping("/orders/{id}", method="GET")
class GetOrder(Scenario):
    """Returns an order."""

    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().validate(False)
        scenario.send().payload('{"id": 1, "state": "shipped"}')


@request_mapping("/orders", method="POST")
class CreateOrder(Scenario):
    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().payload('{"item": "@variable(\'item\')@"}')
        scenario.send().status(201).header("Location", "/orders/2").content_type("text/plain").payload(
            "created ${item}"
        )


class Hello(Scenario):
    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().payload('<Hello xmlns="urn:hello">@variable(\'name\')@</Hello>')
        scenario.send().payload('<HelloResponse xmlns="urn:hello">Hi ${name}</HelloResponse>')


class Notify(ScenarioStarter):
    """Publishes a notification."""

    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.send().destination("Notifications").payload("<Note>${subject}</Note>")

    def parameters(self) -> list[ScenarioParameter]:
        return [
            ScenarioParameter("subject", "Subject", value="hello"),
            ScenarioParameter("level", "Level", ControlType.DROPDOWN, options=["INFO", "WARN"]),
        ]


class Failing(ScenarioStarter):
    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.fail("Launch failed for ${subject}")

    def parameters(self) -> list[ScenarioParameter]:
        return [ScenarioParameter("subject", value="x")]


@pytest.fixture
def app_settings(tmp_path: Path) -> Settings:
    """Provide settings with a temporary database and short timeouts."""
    return Settings(
        _env_file=None,
        simulator=SimulatorSettings(
            _env_file=None,
            template_path=str(tmp_path),
            default_timeout=1000,
            inbound_xml_dictionary=str(tmp_path / "inbound.properties"),
            outbound_xml_dictionary=str(tmp_path / "outbound.properties"),
        ),
        rest=RestSettings(_env_file=None),
        ws=WsSettings(_env_file=None),
        database=DatabaseSettings(_env_file=None, url=f"sqlite+aiosqlite:///{tmp_path / 'simulator.db'}"),
    )


@pytest.fixture
def app_registry() -> ScenarioRegistry:
    """Provide a registry with REST, SOAP and starter scenarios."""
    registry = ScenarioRegistry()
    registry.register("GetOrder", GetOrder)
    registry.register("CreateOrder", CreateOrder)
    registry.register("Hello", Hello)
    registry.register("Notify", Notify)
    registry.register("Failing", Failing)
    return registry


@pytest.fixture
def client(app_settings: Settings, app_registry: ScenarioRegistry):
    """Provide a TestClient with the application lifespan running."""
    app = create_app(settings=app_settings, registry=app_registry)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def wait_for_execution(client):
    """Provide a poller returning an execution once it is no longer active."""

    def wait(execution_id, timeout: float = 5.0) -> dict:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            data = client.get(f"/api/executions/{execution_id}").json()
            if data.get("status") not in (None, "active"):
                return data
            time.sleep(0.05)
        raise AssertionError(f"Execution {execution_id} still active")

    return wait


@pytest.fixture
def wait_for_idle(client):
    """Provide a poller returning all executions once none is active."""

    def wait(timeout: float = 5.0) -> list[dict]:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            running = sum(d.active_executions for d in client.app.state.dispatchers.values())
            executions = client.get("/api/executions").json()
            if not running and all(e["status"] != "active" for e in executions):
                return executions
            time.sleep(0.05)
        raise AssertionError("Executions still active")

    return wait
