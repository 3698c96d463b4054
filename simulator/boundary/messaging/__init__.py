"""Message broker transport."""

from simulator.boundary.messaging.gateway import JmsGateway, to_simulator_message

__all__ = ["JmsGateway", "to_simulator_message"]
