"""
Hello world samples.

A default scenario answering anything, a REST greeting mapped by path and
a SOAP greeting mapped by payload root element.
"""

from simulator.core.registry import request_mapping, scenario
from simulator.core.scenario import Scenario, ScenarioDesigner


@scenario("DEFAULT_SCENARIO")
class DefaultScenario(Scenario):
    """Answers every unmapped request with a generic response."""

    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().validate(False)
        scenario.send().content_type("application/xml").payload(
            "<DefaultResponse>This is a default response!</DefaultResponse>"
        )


@scenario("GreetingGet")
@request_mapping("/greeting", method="GET")
@request_mapping("/greeting/{name}", method="GET")
class GreetingScenario(Scenario):
    """Returns a JSON greeting."""

    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().validate(False)
        scenario.send().content_type("application/json").payload(
            '{"greeting": "Hi there!", "id": "sim:randomUUID()", "date": "sim:currentDate(\'%Y-%m-%d\')"}'
        )


@scenario("Hello")
class HelloScenario(Scenario):
    """SOAP greeting for <Hello> requests."""

    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().payload(
            '<Hello xmlns="http://citrusframework.org/schemas/hello">@variable(\'name\')@</Hello>'
        )
        scenario.send().payload(
            '<HelloResponse xmlns="http://citrusframework.org/schemas/hello">Hi there ${name}!</HelloResponse>'
        )


@scenario("GoodBye")
class GoodByeScenario(Scenario):
    """SOAP farewell for <GoodBye> requests."""

    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().payload(
            '<GoodBye xmlns="http://citrusframework.org/schemas/hello">@ignore@</GoodBye>'
        )
        scenario.send().payload(
            '<GoodByeResponse xmlns="http://citrusframework.org/schemas/hello">Bye bye!</GoodByeResponse>'
        )
