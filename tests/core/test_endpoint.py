"""
Test suite for ScenarioEndpoint and RecordingOutboundChannel.

System role: Verification of the per-execution message exchange
"""

import asyncio

import pytest

from simulator.core.endpoint import RecordingOutboundChannel, ScenarioEndpoint
from simulator.core.exceptions import ScenarioExecutionError, ScenarioTimeoutError
from simulator.core.message import Message


class TestScenarioEndpoint:
    """Test suite for deliver/receive/send."""

    @pytest.mark.asyncio
    async def test_send_should_resolve_pending_reply(self) -> None:
        endpoint = ScenarioEndpoint("Hello")
        reply = endpoint.deliver(Message(payload="request"))

        received = await endpoint.receive(100)
        await endpoint.send(Message(payload="response"))

        assert received.payload == "request"
        assert reply.done()
        assert reply.result().payload == "response"

    @pytest.mark.asyncio
    async def test_receive_should_time_out(self) -> None:
        endpoint = ScenarioEndpoint("Hello", default_timeout_ms=20)

        with pytest.raises(ScenarioTimeoutError) as exc_info:
            await endpoint.receive()

        assert exc_info.value.details["timeout_ms"] == 20

    @pytest.mark.asyncio
    async def test_send_without_pending_reply_should_use_outbound(self) -> None:
        outbound = RecordingOutboundChannel()
        endpoint = ScenarioEndpoint("Fax", outbound=outbound)

        await endpoint.send(Message(payload="status"))

        assert [name for name, _ in outbound.messages] == ["Fax"]

    @pytest.mark.asyncio
    async def test_send_with_destination_should_bypass_reply(self) -> None:
        outbound = RecordingOutboundChannel()
        endpoint = ScenarioEndpoint("Fax", outbound=outbound)
        reply = endpoint.deliver(Message())

        await endpoint.send(Message(payload="status"), destination="Fax.Status")

        assert not reply.done()
        assert outbound.for_destination("Fax.Status")[0].payload == "status"

    @pytest.mark.asyncio
    async def test_send_with_nowhere_to_go_should_raise(self) -> None:
        with pytest.raises(ScenarioExecutionError):
            await ScenarioEndpoint("Fax").send(Message(payload="lost"))

    @pytest.mark.asyncio
    async def test_cancel_pending_should_cancel_open_replies(self) -> None:
        endpoint = ScenarioEndpoint("Hello")
        reply = endpoint.deliver(Message())

        endpoint.cancel_pending()
        await asyncio.sleep(0)

        assert reply.cancelled()


class TestRecordingOutboundChannel:
    """Test suite for RecordingOutboundChannel."""

    @pytest.mark.asyncio
    async def test_should_drop_oldest_when_full(self) -> None:
        channel = RecordingOutboundChannel(max_messages=2)

        for index in range(3):
            await channel.send("queue", Message(payload=str(index)))

        assert [m.payload for m in channel.for_destination("queue")] == ["1", "2"]
