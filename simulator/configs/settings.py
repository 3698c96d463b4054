"""
Unified application settings.

Aggregates the simulator, transport and database sections into a single
Settings class, served cached by get_settings().

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from simulator.configs.base import BaseSettings
from simulator.configs.database import DatabaseSettings
from simulator.configs.simulator import SimulatorSettings
from simulator.configs.transports import JmsSettings, RestSettings, WsSettings


class Settings(BaseSettings):
    """Complete simulator configuration."""

    simulator: SimulatorSettings = Field(default_factory=SimulatorSettings)
    rest: RestSettings = Field(default_factory=RestSettings)
    ws: WsSettings = Field(default_factory=WsSettings)
    jms: JmsSettings = Field(default_factory=JmsSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    def transport_enabled(self, transport: str) -> bool:
        """
        Whether a transport ("rest", "ws" or "jms") is served.

        All transports are off while the simulator itself is disabled.
        """
        section = {"rest": self.rest, "ws": self.ws, "jms": self.jms}[transport]
        return self.simulator.enabled and section.enabled

    @property
    def enabled_transports(self) -> list[str]:
        return [name for name in ("rest", "ws", "jms") if self.transport_enabled(name)]


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables and .env are read once, on first call.

    Usage:
        from simulator.configs import get_settings
        settings = get_settings()
    """
    return Settings()
