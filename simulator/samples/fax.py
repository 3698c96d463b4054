"""
Fax gateway samples.

Asynchronous messaging: a SendFax request is acknowledged by status
updates published to the status destination, and the UpdateFaxStatus
starter publishes a status update on demand.
"""

import enum
import uuid

from simulator.core.registry import scenario, starter
from simulator.core.scenario import (
    ControlType,
    Scenario,
    ScenarioDesigner,
    ScenarioParameter,
    ScenarioStarter,
)

FAX_NAMESPACE = "http://citrusframework.org/schemas/fax"
STATUS_DESTINATION = "Fax.Status"


class FaxStatus(str, enum.Enum):
    QUEUED = "QUEUED"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


def status_update_payload(status: str = "${status}", message: str = "${statusMessage}") -> str:
    return (
        f'<StatusUpdateMessage xmlns="{FAX_NAMESPACE}">'
        "<referenceId>${referenceId}</referenceId>"
        f"<status>{status}</status>"
        f"<statusMessage>{message}</statusMessage>"
        "</StatusUpdateMessage>"
    )


class FaxScenario(Scenario):
    """Shared destinations of the fax samples."""

    status_destination = STATUS_DESTINATION


@scenario("SendFax")
class SendFaxScenario(FaxScenario):
    """Queues a fax and reports it delivered."""

    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().payload(
            f'<SendFaxMessage xmlns="{FAX_NAMESPACE}">'
            "<referenceId>@variable('referenceId')@</referenceId>"
            "<fax>@ignore@</fax>"
            "</SendFaxMessage>"
        )
        scenario.send().destination(self.status_destination).payload(
            status_update_payload(FaxStatus.QUEUED.value, "The fax message has been queued")
        )
        scenario.send().destination(self.status_destination).payload(
            status_update_payload(FaxStatus.SUCCESS.value, "The fax message has been successfully sent")
        )


@starter("UpdateFaxStatus")
class StatusUpdateStarter(FaxScenario, ScenarioStarter):
    """Publishes a status message for a fax."""

    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.echo("Sending Status Message: ${status}")
        scenario.send().destination(self.status_destination).payload(status_update_payload())
        scenario.echo("Done")

    def parameters(self) -> list[ScenarioParameter]:
        return [
            ScenarioParameter("referenceId", "Reference Id", value=str(uuid.uuid4())),
            ScenarioParameter(
                "status",
                "Status",
                control_type=ControlType.DROPDOWN,
                value=FaxStatus.SUCCESS.value,
                options=[s.value for s in FaxStatus],
            ),
            ScenarioParameter("statusMessage", "Status Message", control_type=ControlType.TEXTAREA),
        ]
