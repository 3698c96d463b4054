"""
SOAP web service transport.

Unwraps SOAP 1.1 and 1.2 envelopes posted below the servlet mapping,
dispatches the body payload to a scenario and wraps the reply in an
envelope of the same SOAP version. Fallback replies and malformed
envelopes are answered with SOAP faults.

Routes: POST {servlet_mapping}/{path}

Dependencies: fastapi, xml.etree (stdlib), simulator.core
System role: SOAP inbound transport
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from xml.sax.saxutils import escape

from fastapi import APIRouter, Depends, Request, Response

from simulator.api.deps import get_dispatcher
from simulator.core.dispatcher import ScenarioDispatcher
from simulator.core.exceptions import SoapEnvelopeError
from simulator.core.fallback import REASON_TEXT
from simulator.core.message import Message

logger = logging.getLogger(__name__)

SOAP_11_NS = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP_12_NS = "http://www.w3.org/2003/05/soap-envelope"

_CONTENT_TYPES = {
    SOAP_11_NS: "text/xml; charset=utf-8",
    SOAP_12_NS: "application/soap+xml; charset=utf-8",
}
_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>\s*")
_REASONS = {reason.value: text for reason, text in REASON_TEXT.items()}
_CLIENT_FAULT_CODES = ("client", "sender")

router = APIRouter(tags=["ws-transport"])


@dataclass
class SoapRequest:
    """Unwrapped SOAP request."""

    namespace: str
    payload: str


def parse_envelope(content: str) -> SoapRequest:
    """
    Extract the body payload of a SOAP envelope.

    Args:
        content: Raw HTTP body

    Returns:
        SoapRequest: SOAP version namespace and the first body child as XML text

    Raises:
        SoapEnvelopeError: If the content is not a SOAP 1.1 or 1.2 envelope
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise SoapEnvelopeError(f"Request is not well-formed XML: {e}") from e

    for namespace in (SOAP_11_NS, SOAP_12_NS):
        if root.tag == f"{{{namespace}}}Envelope":
            break
    else:
        raise SoapEnvelopeError("Request is not a SOAP envelope", {"root": root.tag})

    body = root.find(f"{{{namespace}}}Body")
    if body is None:
        raise SoapEnvelopeError("SOAP envelope has no Body", {"namespace": namespace})

    children = list(body)
    payload = ET.tostring(children[0], encoding="unicode") if children else ""
    return SoapRequest(namespace=namespace, payload=payload.strip())


def wrap_envelope(payload: str, namespace: str = SOAP_11_NS) -> str:
    """Wrap a payload in a SOAP envelope of the given version."""
    body = _XML_DECLARATION.sub("", payload or "")
    return (
        f'<SOAP-ENV:Envelope xmlns:SOAP-ENV="{namespace}">'
        "<SOAP-ENV:Header/>"
        f"<SOAP-ENV:Body>{body}</SOAP-ENV:Body>"
        "</SOAP-ENV:Envelope>"
    )


def soap_fault(namespace: str, client: bool, reason: str) -> str:
    """
    Build a SOAP fault element for the given version.

    Args:
        namespace: SOAP envelope namespace
        client: Sender/Client fault when True, Receiver/Server otherwise
        reason: Fault string
    """
    reason = escape(reason)
    if namespace == SOAP_12_NS:
        code = "Sender" if client else "Receiver"
        return (
            f'<SOAP-ENV:Fault xmlns:SOAP-ENV="{namespace}">'
            f"<SOAP-ENV:Code><SOAP-ENV:Value>SOAP-ENV:{code}</SOAP-ENV:Value></SOAP-ENV:Code>"
            f'<SOAP-ENV:Reason><SOAP-ENV:Text xml:lang="en">{reason}</SOAP-ENV:Text></SOAP-ENV:Reason>'
            "</SOAP-ENV:Fault>"
        )
    code = "Client" if client else "Server"
    return (
        f'<SOAP-ENV:Fault xmlns:SOAP-ENV="{namespace}">'
        f"<faultcode>SOAP-ENV:{code}</faultcode>"
        f"<faultstring>{reason}</faultstring>"
        "</SOAP-ENV:Fault>"
    )


def _envelope_response(payload: str, namespace: str, status_code: int, headers: dict | None = None) -> Response:
    return Response(
        content=wrap_envelope(payload, namespace),
        status_code=status_code,
        headers=headers,
        media_type=_CONTENT_TYPES[namespace],
    )


def to_response(reply: Message | None, namespace: str) -> Response:
    """
    Build the SOAP HTTP response for a scenario reply.

    Fallback faults are rendered in the request's SOAP version. A missing
    reply is answered with 202 Accepted and no body.
    """
    if reply is None:
        return Response(status_code=202)

    fallback = reply.header("x-simulator-fallback")
    fault_code = reply.header("x-soap-fault")
    if fallback and fault_code:
        reason = _REASONS.get(fallback, fallback)
        client = fault_code.lower() in _CLIENT_FAULT_CODES
        return _envelope_response(
            soap_fault(namespace, client=client, reason=reason),
            namespace,
            reply.status_code or 500,
            {"x-simulator-fallback": fallback},
        )

    headers = {
        k: v for k, v in reply.headers.items()
        if k not in ("content-type", "content-length", "soapaction")
    }
    return _envelope_response(reply.payload, namespace, reply.status_code or 200, headers)


@router.post("", include_in_schema=False)
@router.post("/{path:path}", include_in_schema=False)
async def handle_soap_request(
    request: Request,
    path: str = "",
    dispatcher: ScenarioDispatcher = Depends(get_dispatcher("ws")),
) -> Response:
    """Dispatch a SOAP request below the servlet mapping to a scenario."""
    content = (await request.body()).decode("utf-8", errors="replace")
    try:
        soap_request = parse_envelope(content)
    except SoapEnvelopeError as e:
        logger.warning("Rejecting SOAP request on /%s: %s", path, e)
        namespace = SOAP_12_NS if "application/soap+xml" in request.headers.get("content-type", "") else SOAP_11_NS
        return _envelope_response(soap_fault(namespace, client=True, reason=e.message), namespace, 500)

    message = Message(
        payload=soap_request.payload,
        headers=dict(request.headers),
        method=request.method,
        path="/" + path.lstrip("/"),
        query=dict(request.query_params),
    )
    reply = await dispatcher.dispatch(message)
    return to_response(reply, soap_request.namespace)
