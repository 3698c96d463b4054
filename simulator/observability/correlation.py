"""
Correlation id propagation.

A ContextVar carries the id of the exchange currently being handled. HTTP
requests set it in middleware, broker messages in the gateway; scenario
tasks started while it is set inherit it.

Dependencies: contextvars
System role: Request tracing across transports and scenario executions
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set the correlation id, generating a uuid4 when none is given.

    Returns:
        str: The id now in effect
    """
    value = correlation_id or str(uuid.uuid4())
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Current correlation id, empty string when unset."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Set a correlation id for the enclosed block and restore the previous one afterwards."""
    token = correlation_id_ctx.set(correlation_id or str(uuid.uuid4()))
    try:
        yield correlation_id_ctx.get()
    finally:
        correlation_id_ctx.reset(token)
