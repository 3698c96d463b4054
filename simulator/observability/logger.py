"""
Logger configuration.

Configures a stdout handler whose records carry the current correlation
id, so that an HTTP exchange and the scenario execution it triggered can
be followed in the log.

Dependencies: logging (stdlib), simulator.observability.correlation
System role: Centralized logging configuration
"""

import logging
import sys

from simulator.observability.correlation import get_correlation_id

HANDLER_NAME = "simulator-stdout"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"
QUIET_LOGGERS = ("kombu", "amqp", "sqlalchemy.engine", "aiosqlite")


class CorrelationIdFilter(logging.Filter):
    """Adds the context correlation id (or "-") to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> logging.Handler:
    """
    Install the simulator stdout handler on the root logger.

    Calling it again replaces the handler instead of adding a second one;
    handlers installed by others are left alone.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        logging.Handler: The installed handler
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler

