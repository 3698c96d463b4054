"""
REST transport.

Catch-all routes under the configured URL mapping. Every request is turned
into a Message and dispatched to a scenario; the scenario reply becomes the
HTTP response.

Routes: any method on {url_mapping}/{path}

Dependencies: fastapi, simulator.core
System role: HTTP inbound transport
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from simulator.api.deps import get_dispatcher, get_settings_dependency
from simulator.configs import Settings
from simulator.core.dispatcher import ScenarioDispatcher
from simulator.core.message import Message, sniff_content_type
from simulator.observability.log_utils import describe_message

logger = logging.getLogger(__name__)

HTTP_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

# Set by the server from the actual body
_HOP_HEADERS = {"content-length", "content-type", "transfer-encoding", "connection"}

router = APIRouter(tags=["rest-transport"])


async def to_message(request: Request, path: str) -> Message:
    """Build a simulator Message from an HTTP request."""
    body = await request.body()
    return Message(
        payload=body.decode("utf-8", errors="replace"),
        headers=dict(request.headers),
        method=request.method,
        path="/" + path.lstrip("/"),
        query=dict(request.query_params),
    )


def to_response(reply: Message | None, fallback_status_code: int) -> Response:
    """
    Build the HTTP response for a scenario reply.

    Args:
        reply: Scenario reply or fallback message
        fallback_status_code: Status used when there is no reply at all

    Returns:
        Response: Reply body, headers and status; empty when reply is None
    """
    if reply is None:
        return Response(status_code=fallback_status_code)

    media_type = reply.header("content-type")
    if media_type is None and reply.payload:
        media_type = sniff_content_type(reply.payload)
    headers = {k: v for k, v in reply.headers.items() if k not in _HOP_HEADERS}
    return Response(
        content=reply.payload,
        status_code=reply.status_code or 200,
        headers=headers,
        media_type=media_type,
    )


@router.api_route("", methods=HTTP_METHODS, include_in_schema=False)
@router.api_route("/{path:path}", methods=HTTP_METHODS, include_in_schema=False)
async def handle_rest_request(
    request: Request,
    path: str = "",
    dispatcher: ScenarioDispatcher = Depends(get_dispatcher("rest")),
    settings: Settings = Depends(get_settings_dependency),
) -> Response:
    """Dispatch any HTTP request below the URL mapping to a scenario."""
    message = await to_message(request, path)
    logger.debug("REST request %s", describe_message(message))
    reply = await dispatcher.dispatch(message)
    return to_response(reply, settings.rest.fallback_status_code)
