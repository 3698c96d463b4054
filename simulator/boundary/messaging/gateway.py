"""
Message broker gateway.

Consumes the simulator's inbound queue, dispatches each message to a
scenario and publishes replies. Also serves as outbound channel for send
steps addressed to a destination queue.

Dependencies: kombu, simulator.core, simulator.configs
System role: Asynchronous messaging transport
"""

import asyncio
import concurrent.futures
import json
import logging
import threading
from typing import Any

from kombu import Connection

from simulator.configs.transports import JmsSettings
from simulator.core.dispatcher import ScenarioDispatcher
from simulator.core.message import Message
from simulator.observability.correlation import correlation_scope
from simulator.observability.log_utils import describe_message

logger = logging.getLogger(__name__)

ACCEPT_CONTENT = ["json", "text/plain", "application/data"]
CORRELATION_HEADER = "correlation_id"


def to_simulator_message(body: Any, headers: dict | None, properties: dict | None) -> Message:
    """
    Convert a broker message into a simulator Message.

    Args:
        body: Decoded message body
        headers: Application headers
        properties: Broker properties (correlation_id, reply_to)

    Returns:
        Message: Simulator message; JSON bodies that are not strings are re-encoded
    """
    if isinstance(body, bytes):
        payload = body.decode("utf-8")
    elif isinstance(body, str):
        payload = body
    elif body is None:
        payload = ""
    else:
        payload = json.dumps(body)

    message_headers = dict(headers or {})
    properties = properties or {}
    for name in ("correlation_id", "reply_to"):
        if properties.get(name):
            message_headers.setdefault(name, properties[name])
    return Message(payload=payload, headers=message_headers)


class JmsGateway:
    """Kombu based inbound consumer and outbound producer."""

    def __init__(
        self,
        settings: JmsSettings,
        dispatcher: ScenarioDispatcher | None = None,
        exception_delay_ms: int = 5000,
        reply_timeout_ms: int = 5000,
    ) -> None:
        """
        Initialize gateway.

        Args:
            settings: Broker transport settings
            dispatcher: Dispatcher for inbound messages; may be attached later
            exception_delay_ms: Pause after uncategorized consumer exceptions
            reply_timeout_ms: Upper bound for waiting on a dispatch result
        """
        self.settings = settings
        self.dispatcher = dispatcher
        self.exception_delay_ms = exception_delay_ms
        self.reply_timeout_ms = reply_timeout_ms
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._stopping = threading.Event()
        self._publish_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def dispatch_timeout(self) -> float:
        """
        Seconds to wait for a dispatch result.

        A dispatch can wait twice the reply timeout: once for the reply and
        once for a scenario that withdrew its reply while finishing.
        """
        return 2 * self.reply_timeout_ms / 1000 + 1

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """
        Start consuming the inbound destination in a background thread.

        Args:
            loop: Event loop running the dispatcher (current loop when None)
        """
        if self.dispatcher is None:
            raise RuntimeError("JmsGateway requires a dispatcher before start()")
        if self.is_running:
            return
        self._loop = loop or asyncio.get_running_loop()
        self._stopping.clear()
        self._thread = threading.Thread(
            target=self._consume,
            name=f"jms-consumer-{self.settings.inbound_destination}",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "Consuming %s on %s",
            self.settings.inbound_destination,
            self.settings.broker_url,
        )

    def stop(self, timeout: float = 5.0) -> None:
        """Signal the consumer thread to stop and wait for it."""
        self._stopping.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Stopped consuming %s", self.settings.inbound_destination)

    def _consume(self) -> None:
        with Connection(self.settings.broker_url) as connection:
            queue = connection.SimpleQueue(self.settings.inbound_destination, accept=ACCEPT_CONTENT)
            try:
                while not self._stopping.is_set():
                    try:
                        received = queue.get(block=True, timeout=self.settings.poll_timeout)
                    except queue.Empty:
                        continue
                    try:
                        self.handle(connection, received)
                    except Exception as e:
                        logger.exception("Failed to process inbound message: %s", e)
                        self._stopping.wait(self.exception_delay_ms / 1000)
                    finally:
                        received.ack()
            finally:
                queue.close()

    def handle(self, connection: Connection, received) -> Message | None:
        """
        Dispatch one received broker message and publish the reply.

        Args:
            connection: Connection used for publishing the reply
            received: kombu message

        Returns:
            Message | None: Reply produced by the dispatcher
        """
        properties = dict(received.properties or {})
        message = to_simulator_message(received.payload, received.headers, properties)

        with correlation_scope(properties.get("correlation_id")):
            logger.debug("Received %s from %s", describe_message(message), self.settings.inbound_destination)
            future = asyncio.run_coroutine_threadsafe(self.dispatcher.dispatch(message), self._loop)
            try:
                reply = future.result(timeout=self.dispatch_timeout)
            except concurrent.futures.TimeoutError:
                future.cancel()
                raise

        if reply is None or not self.settings.synchronous:
            return reply

        destination = properties.get("reply_to") or self.settings.reply_destination
        self._publish(
            connection,
            destination,
            reply,
            correlation_id=properties.get("correlation_id"),
        )
        return reply

    def _publish(
        self,
        connection: Connection,
        destination: str,
        message: Message,
        correlation_id: str | None = None,
    ) -> None:
        queue = connection.SimpleQueue(destination, accept=ACCEPT_CONTENT)
        try:
            options: dict[str, Any] = {}
            if correlation_id:
                options["correlation_id"] = correlation_id
            queue.put(
                message.payload,
                serializer="json",
                headers=dict(message.headers),
                **options,
            )
        finally:
            queue.close()
        logger.info("Published message %s to %s", message.id, destination)

    def publish(self, destination: str, message: Message) -> None:
        """Publish a message to a destination queue on a fresh connection."""
        with self._publish_lock, Connection(self.settings.broker_url) as connection:
            self._publish(
                connection,
                destination,
                message,
                correlation_id=message.header(CORRELATION_HEADER),
            )

    async def send(self, destination: str, message: Message) -> None:
        """Outbound channel interface for scenario send steps."""
        await asyncio.to_thread(self.publish, destination, message)
