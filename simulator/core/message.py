"""
Simulator message model.

Transport-neutral representation of inbound requests and generated
responses.

Dependencies: dataclasses (stdlib)
System role: Message exchanged between transports, endpoints and scenarios
"""

import json
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any


def _normalize_headers(headers: dict[str, Any] | None) -> dict[str, str]:
    return {str(k).lower(): str(v) for k, v in (headers or {}).items()}


@dataclass
class Message:
    """
    Message travelling through the simulator.

    Header names are stored lower-cased so lookups are case-insensitive.
    A status_code of None means the transport default (200 for HTTP).
    """

    payload: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    method: str | None = None
    path: str | None = None
    query: dict[str, str] = field(default_factory=dict)
    status_code: int | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        self.headers = _normalize_headers(self.headers)
        if self.method:
            self.method = self.method.upper()

    def header(self, name: str, default: str | None = None) -> str | None:
        """Get a header value by case-insensitive name."""
        return self.headers.get(name.lower(), default)

    @property
    def content_type(self) -> str | None:
        """Content type header without parameters."""
        value = self.header("content-type")
        if value is None:
            return None
        return value.split(";", 1)[0].strip().lower()

    def with_headers(self, **headers: Any) -> "Message":
        """Return a copy with additional headers merged in."""
        merged = dict(self.headers)
        merged.update(_normalize_headers(headers))
        return replace(self, headers=merged)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and persistence."""
        return {
            "id": str(self.id),
            "payload": self.payload,
            "headers": dict(self.headers),
            "method": self.method,
            "path": self.path,
            "query": dict(self.query),
            "status_code": self.status_code,
            "timestamp": self.timestamp.isoformat(),
        }


def sniff_content_type(payload: str) -> str:
    """
    Guess a media type from payload content.

    Args:
        payload: Message body

    Returns:
        str: application/xml, application/json or text/plain
    """
    stripped = payload.lstrip()
    if stripped.startswith("<"):
        return "application/xml"
    if stripped.startswith(("{", "[")):
        try:
            json.loads(stripped)
        except ValueError:
            return "text/plain"
        return "application/json"
    return "text/plain"
