"""
Simulator configuration settings.

Core simulator properties: default scenario, timeouts, template location,
validation switch and data dictionary files.

Dependencies: pydantic, pydantic_settings
System role: Scenario engine configuration
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class SimulatorSettings(BaseSettings):
    """Scenario engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SIMULATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Global switch for simulator support")
    template_path: str = Field(
        default="templates",
        description="Directory holding payload templates",
    )
    default_scenario: str = Field(
        default="DEFAULT_SCENARIO",
        description="Scenario executed when no mapping key matches",
    )
    default_timeout: int = Field(
        default=5000,
        ge=0,
        description="Timeout in milliseconds when waiting for messages",
    )
    template_validation: bool = Field(
        default=True,
        description="Validate received messages against expected payloads",
    )
    exception_delay: int = Field(
        default=5000,
        ge=0,
        description="Delay in milliseconds after uncategorized consumer exceptions",
    )
    inbound_xml_dictionary: str = Field(
        default="inbound-xml-dictionary.properties",
        description="Data dictionary applied to received XML messages",
    )
    outbound_xml_dictionary: str = Field(
        default="outbound-xml-dictionary.properties",
        description="Data dictionary applied to generated XML messages",
    )
    scenario_modules: list[str] = Field(
        default_factory=list,
        description="Modules imported at startup to register scenarios",
    )

    @property
    def default_timeout_seconds(self) -> float:
        """Default timeout converted to seconds for asyncio waits."""
        return self.default_timeout / 1000

    @property
    def exception_delay_seconds(self) -> float:
        """Exception delay converted to seconds."""
        return self.exception_delay / 1000

    def log_configuration(self) -> None:
        """Log the effective simulator configuration once at startup."""
        logger.info(
            "Using the simulator configuration: %s",
            self.model_dump(),
        )
