"""
Observability module.

Provides logging configuration, correlation id tracking and request
logging middleware.
"""

from simulator.observability.correlation import (
    clear_correlation_id,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from simulator.observability.logger import configure_logging

__all__ = [
    "clear_correlation_id",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "set_correlation_id",
]
