"""
Tests for logging helpers, correlation ids and logging configuration.
"""

import logging

from simulator.core.message import Message
from simulator.observability import (
    clear_correlation_id,
    configure_logging,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from simulator.observability.log_utils import describe_message, safe_log_value
from simulator.observability.logger import HANDLER_NAME, CorrelationIdFilter


class TestSafeLogValue:
    """Test suite for safe_log_value()."""

    def test_multiline_payload_is_flattened(self) -> None:
        assert safe_log_value("<a>\n  <b>1</b>\n</a>") == "<a> <b>1</b> </a>"

    def test_long_value_is_truncated(self) -> None:
        result = safe_log_value("x" * 50, max_length=10)

        assert result == "xxxxxxxxxx... (50 chars)"

    def test_containers_are_summarized(self) -> None:
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"
        assert safe_log_value(None) == "None"


def test_describe_message_includes_method_path_and_payload() -> None:
    message = Message(payload="<Ping/>", method="post", path="/orders")

    summary = describe_message(message)

    assert summary.startswith("POST /orders [")
    assert summary.endswith("<Ping/>")
    assert describe_message(Message()).endswith("<empty>")


class TestCorrelation:
    """Test suite for correlation id helpers."""

    def test_set_without_value_generates_id(self) -> None:
        value = set_correlation_id()

        assert value
        assert get_correlation_id() == value
        clear_correlation_id()
        assert get_correlation_id() == ""

    def test_scope_restores_previous_id(self) -> None:
        set_correlation_id("outer")

        with correlation_scope("inner") as value:
            assert value == "inner"
            assert get_correlation_id() == "inner"

        assert get_correlation_id() == "outer"
        clear_correlation_id()

    def test_filter_adds_context_id_to_record(self) -> None:
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)

        with correlation_scope("abc"):
            CorrelationIdFilter().filter(record)

        assert record.correlation_id == "abc"


def test_configure_logging_replaces_own_handler_only() -> None:
    root = logging.getLogger()
    previous_level = root.level
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        configure_logging("DEBUG")
        configure_logging("WARNING")

        own = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
        assert len(own) == 1
        assert foreign in root.handlers
        assert root.level == logging.WARNING
        assert logging.getLogger("kombu").level == logging.WARNING
    finally:
        root.removeHandler(foreign)
        root.setLevel(previous_level)
        for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
            root.removeHandler(handler)
