"""
Transport configuration settings.

REST, SOAP web service and message broker endpoint configuration including
the scenario mapping strategy per transport.

Dependencies: pydantic, pydantic_settings
System role: Inbound transport configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RestSettings(BaseSettings):
    """REST/HTTP transport configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SIMULATOR_REST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Enable the REST transport")
    url_mapping: str = Field(
        default="/services/rest",
        description="Path prefix handled by the REST transport",
    )
    mapping_strategy: str = Field(
        default="request-mapping",
        description="Scenario mapper (request-mapping, header, path, query, xpath, chain)",
    )
    mapping_header: str = Field(
        default="X-Simulator-Scenario",
        description="Header read by the header mapping strategy",
    )
    mapping_query_param: str = Field(
        default="scenario",
        description="Query parameter read by the query mapping strategy",
    )
    fallback_status_code: int = Field(
        default=500,
        description="HTTP status returned when no scenario answers",
    )
    openapi_spec: str | None = Field(
        default=None,
        description="OpenAPI/Swagger file used to generate scenarios",
    )


class WsSettings(BaseSettings):
    """SOAP web service transport configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SIMULATOR_WS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = Field(default=True, description="Enable the SOAP transport")
    servlet_mapping: str = Field(
        default="/services/ws",
        description="Path prefix handled by the SOAP transport",
    )
    mapping_strategy: str = Field(
        default="xpath",
        description="Scenario mapper (xpath, soap-action, header, path, chain)",
    )
    mapping_header: str = Field(
        default="X-Simulator-Scenario",
        description="Header read by the header mapping strategy",
    )
    xpath_expression: str | None = Field(
        default=None,
        description="ElementTree path selecting the mapping key, root element name when unset",
    )
    namespaces: dict[str, str] = Field(
        default_factory=dict,
        description="Namespace prefixes usable in the xpath expression",
    )


class JmsSettings(BaseSettings):
    """Message broker transport configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SIMULATOR_JMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = Field(default=False, description="Enable the broker transport")
    broker_url: str = Field(default="memory://", description="Kombu broker URL")
    inbound_destination: str = Field(
        default="Simulator.Inbound",
        description="Queue consumed by the simulator",
    )
    reply_destination: str = Field(
        default="Simulator.Reply",
        description="Queue for replies when the inbound message has no reply_to",
    )
    synchronous: bool = Field(
        default=True,
        description="Publish scenario replies back to the caller",
    )
    mapping_strategy: str = Field(
        default="header",
        description="Scenario mapper (header, xpath, chain)",
    )
    mapping_header: str = Field(
        default="X-Simulator-Scenario",
        description="Message header read by the header mapping strategy",
    )
    poll_timeout: float = Field(
        default=1.0,
        gt=0,
        description="Seconds to wait for broker events per poll",
    )
