"""
Fallback endpoint adapters.

Produce the response when no scenario matches, the scenario fails, or no
reply arrives in time.

Dependencies: enum (stdlib)
System role: Default responders of the dispatcher
"""

import enum
import logging
from typing import Protocol
from xml.sax.saxutils import escape

from simulator.core.message import Message

logger = logging.getLogger(__name__)


class FallbackReason(str, enum.Enum):
    """Why the dispatcher fell back to the endpoint adapter."""

    NO_MATCH = "no_match"
    VALIDATION_FAILED = "validation_failed"
    SCENARIO_FAILED = "scenario_failed"
    NO_RESPONSE = "no_response"
    TIMEOUT = "timeout"


REASON_TEXT = {
    FallbackReason.NO_MATCH: "No scenario found for request",
    FallbackReason.VALIDATION_FAILED: "Request validation failed",
    FallbackReason.SCENARIO_FAILED: "Scenario execution failed",
    FallbackReason.NO_RESPONSE: "Scenario did not generate a response",
    FallbackReason.TIMEOUT: "Timeout waiting for scenario response",
}


class EndpointAdapter(Protocol):
    """Responder invoked by the dispatcher instead of a scenario."""

    def handle(self, request: Message, reason: FallbackReason) -> Message | None:
        ...


class EmptyResponseEndpointAdapter:
    """Answers with an empty message."""

    def handle(self, request: Message, reason: FallbackReason) -> Message | None:
        return Message()


class StaticResponseEndpointAdapter:
    """Answers with a fixed payload, status and headers."""

    def __init__(
        self,
        payload: str = "",
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.payload = payload
        self.status_code = status_code
        self.headers = headers or {}

    def handle(self, request: Message, reason: FallbackReason) -> Message | None:
        return Message(payload=self.payload, headers=self.headers, status_code=self.status_code)


class HttpCodeEndpointAdapter:
    """Answers with an empty body and a fixed HTTP status."""

    def __init__(self, status_code: int = 500) -> None:
        self.status_code = status_code

    def handle(self, request: Message, reason: FallbackReason) -> Message | None:
        return Message(
            headers={"x-simulator-fallback": reason.value},
            status_code=self.status_code,
        )


class TimeoutEndpointAdapter:
    """Produces no response at all."""

    def handle(self, request: Message, reason: FallbackReason) -> Message | None:
        logger.debug("Suppressing response for fallback reason %s", reason.value)
        return None


class SoapFaultEndpointAdapter:
    """
    Answers with a SOAP fault describing the fallback reason.

    fault_code is "Server" or "Client" (SOAP 1.1 names); the SOAP transport
    maps them to Receiver and Sender for SOAP 1.2 requests.
    """

    def __init__(self, fault_code: str = "Server") -> None:
        self.fault_code = fault_code

    def handle(self, request: Message, reason: FallbackReason) -> Message | None:
        fault_string = escape(REASON_TEXT[reason])
        payload = (
            "<SOAP-ENV:Fault xmlns:SOAP-ENV=\"http://schemas.xmlsoap.org/soap/envelope/\">"
            f"<faultcode>SOAP-ENV:{self.fault_code}</faultcode>"
            f"<faultstring>{fault_string}</faultstring>"
            "</SOAP-ENV:Fault>"
        )
        return Message(
            payload=payload,
            headers={"x-simulator-fallback": reason.value, "x-soap-fault": self.fault_code},
            status_code=500,
        )
