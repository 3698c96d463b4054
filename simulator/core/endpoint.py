"""
Scenario endpoint.

Per-execution channel between a transport and a running scenario: inbound
messages are queued for receive steps, the first send step resolves the
transport's reply.

Dependencies: asyncio (stdlib)
System role: Message exchange for one scenario execution
"""

import asyncio
import logging
from typing import Protocol

from simulator.core.exceptions import ScenarioExecutionError, ScenarioTimeoutError
from simulator.core.message import Message

logger = logging.getLogger(__name__)


class OutboundChannel(Protocol):
    """Destination-addressed sender used by send steps outside a request/reply exchange."""

    async def send(self, destination: str, message: Message) -> None:
        ...


class RecordingOutboundChannel:
    """Outbound channel keeping sent messages in memory."""

    def __init__(self, max_messages: int = 1000) -> None:
        self.max_messages = max_messages
        self.messages: list[tuple[str, Message]] = []

    async def send(self, destination: str, message: Message) -> None:
        logger.info("Recorded outbound message for destination %s", destination)
        self.messages.append((destination, message))
        if len(self.messages) > self.max_messages:
            del self.messages[0]

    def for_destination(self, destination: str) -> list[Message]:
        return [message for name, message in self.messages if name == destination]


class ScenarioEndpoint:
    """Inbound queue and pending reply of a single scenario execution."""

    def __init__(
        self,
        name: str,
        default_timeout_ms: int = 5000,
        outbound: OutboundChannel | None = None,
    ) -> None:
        """
        Initialize endpoint.

        Args:
            name: Endpoint name, usually the scenario name
            default_timeout_ms: Receive timeout when a step sets none
            outbound: Channel for messages that have no pending reply
        """
        self.name = name
        self.default_timeout_ms = default_timeout_ms
        self.outbound = outbound
        self._inbound: asyncio.Queue[Message] = asyncio.Queue()
        self._replies: asyncio.Queue[asyncio.Future] = asyncio.Queue()

    def deliver(self, message: Message) -> asyncio.Future:
        """
        Queue an inbound message for the scenario.

        Returns:
            asyncio.Future: Resolved with the scenario's reply message
        """
        reply = asyncio.get_running_loop().create_future()
        self._replies.put_nowait(reply)
        self._inbound.put_nowait(message)
        return reply

    async def receive(self, timeout_ms: int | None = None) -> Message:
        """
        Wait for the next inbound message.

        Raises:
            ScenarioTimeoutError: If no message arrives in time
        """
        timeout = self.default_timeout_ms if timeout_ms is None else timeout_ms
        try:
            return await asyncio.wait_for(self._inbound.get(), timeout / 1000)
        except asyncio.TimeoutError:
            raise ScenarioTimeoutError(timeout, self.name) from None

    def _pending_reply(self) -> asyncio.Future | None:
        while not self._replies.empty():
            reply = self._replies.get_nowait()
            if not reply.done():
                return reply
        return None

    async def send(self, message: Message, destination: str | None = None) -> None:
        """
        Send a message produced by the scenario.

        Without destination the oldest pending reply is resolved; when no
        reply is pending the message goes to the outbound channel.

        Raises:
            ScenarioExecutionError: If the message has nowhere to go
        """
        if destination is None:
            reply = self._pending_reply()
            if reply is not None:
                reply.set_result(message)
                return

        if self.outbound is None:
            raise ScenarioExecutionError(
                "No reply pending and no outbound channel configured",
                scenario=self.name,
                details={"destination": destination},
            )
        await self.outbound.send(destination or self.name, message)

    def cancel_pending(self) -> None:
        """Cancel replies nobody will answer any more."""
        while not self._replies.empty():
            reply = self._replies.get_nowait()
            if not reply.done():
                reply.cancel()
