"""
Logging helpers for message payloads and scenario context.

Payloads are multi-line XML or JSON documents of arbitrary size; these
helpers flatten and truncate them before they reach a log record.

Dependencies: logging (stdlib)
System role: Structured logging helpers for the scenario engine
"""

import logging
import re
from typing import Any

_WHITESPACE = re.compile(r"\s+")


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Render a value for a log record.

    Strings are collapsed to a single line, containers are summarized and
    anything longer than max_length is cut.

    Args:
        value: Value to render
        max_length: Maximum length before truncating

    Returns:
        str: Single line representation
    """
    if value is None:
        return "None"
    if isinstance(value, str):
        text = _WHITESPACE.sub(" ", value).strip()
    elif isinstance(value, (list, tuple, set)):
        text = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    else:
        try:
            text = str(value)
        except Exception as e:
            return f"<unrepresentable {type(value).__name__}: {type(e).__name__}>"

    if len(text) > max_length:
        return f"{text[:max_length]}... ({len(text)} chars)"
    return text


def describe_message(message: Any, max_length: int = 200) -> str:
    """One-line summary of a simulator message: method, path, id and payload head."""
    target = " ".join(part for part in (message.method, message.path) if part)
    head = safe_log_value(message.payload, max_length) if message.payload else "<empty>"
    return f"{target or 'message'} [{message.id}] {head}"


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    """Log a message with context values passed through safe_log_value()."""
    logger.log(level, message, extra={key: safe_log_value(val) for key, val in context.items()})


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log a failure with its traceback and context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Values such as execution_id or scenario
    """
    extra = {key: safe_log_value(val) for key, val in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
