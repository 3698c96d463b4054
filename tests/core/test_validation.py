"""
Test suite for MessageValidator.

Tests XML, JSON and plain text payload comparison, header checks and the
@ignore@ / @variable()@ placeholders.

System role: Verification of inbound message validation
"""

import pytest

from simulator.core.exceptions import MessageValidationError
from simulator.core.message import Message
from simulator.core.validation import MessageValidator
from simulator.core.variables import ScenarioContext


@pytest.fixture
def validator() -> MessageValidator:
    """Provide MessageValidator instance for testing."""
    return MessageValidator()


class TestXmlValidation:
    """Test suite for XML payload comparison."""

    def test_equal_documents_should_pass(self, validator: MessageValidator, context: ScenarioContext) -> None:
        validator.validate_payload(
            "<Order><id>1</id><item>Fax</item></Order>",
            "<Order>\n  <id>1</id>\n  <item>Fax</item>\n</Order>",
            context,
        )

    def test_text_mismatch_should_report_path(self, validator: MessageValidator, context: ScenarioContext) -> None:
        with pytest.raises(MessageValidationError) as exc_info:
            validator.validate_payload("<Order><id>1</id></Order>", "<Order><id>2</id></Order>", context)

        assert exc_info.value.path == "Order.id"
        assert exc_info.value.details["expected"] == "1"
        assert exc_info.value.details["actual"] == "2"

    def test_ignore_should_skip_element_subtree(self, validator: MessageValidator, context: ScenarioContext) -> None:
        validator.validate_payload(
            "<Order><id>@ignore@</id><lines>@ignore@</lines></Order>",
            "<Order><id>7</id><lines><line>a</line><line>b</line></lines></Order>",
            context,
        )

    def test_variable_placeholder_should_capture_value(
        self, validator: MessageValidator, context: ScenarioContext
    ) -> None:
        validator.validate_payload(
            '<Hello xmlns="urn:hello">@variable(\'name\')@</Hello>',
            '<Hello xmlns="urn:hello">Sam</Hello>',
            context,
        )

        assert context.get_variable("name") == "Sam"

    def test_captured_value_should_be_stored_verbatim(
        self, validator: MessageValidator, context: ScenarioContext
    ) -> None:
        validator.validate_payload(
            "<A><ref>@variable('ref')@</ref><code>@variable('code')@</code></A>",
            "<A><ref>price ${total}</ref><code>sim:upperCase('abc')</code></A>",
            context,
        )

        assert context.get_variable("ref") == "price ${total}"
        assert context.get_variable("code") == "sim:upperCase('abc')"

    def test_namespace_mismatch_should_fail(self, validator: MessageValidator, context: ScenarioContext) -> None:
        with pytest.raises(MessageValidationError, match="Element names not equal"):
            validator.validate_payload('<Hello xmlns="urn:a"/>', '<Hello xmlns="urn:b"/>', context)

    def test_child_count_mismatch_should_fail(self, validator: MessageValidator, context: ScenarioContext) -> None:
        with pytest.raises(MessageValidationError, match="Number of child elements"):
            validator.validate_payload("<a><b/></a>", "<a><b/><b/></a>", context)

    def test_attribute_values_should_be_compared(self, validator: MessageValidator, context: ScenarioContext) -> None:
        with pytest.raises(MessageValidationError):
            validator.validate_payload('<a type="x"/>', '<a type="y"/>', context)

    def test_malformed_received_xml_should_fail(self, validator: MessageValidator, context: ScenarioContext) -> None:
        with pytest.raises(MessageValidationError, match="not well-formed"):
            validator.validate_payload("<a/>", "<a>", context)


class TestJsonValidation:
    """Test suite for JSON payload comparison."""

    def test_equal_objects_should_pass_regardless_of_key_order(
        self, validator: MessageValidator, context: ScenarioContext
    ) -> None:
        validator.validate_payload('{"a": 1, "b": [true, "x"]}', '{"b": [true, "x"], "a": 1}', context)

    def test_missing_key_should_fail(self, validator: MessageValidator, context: ScenarioContext) -> None:
        with pytest.raises(MessageValidationError, match="JSON keys not equal"):
            validator.validate_payload('{"a": 1, "b": 2}', '{"a": 1}', context)

    def test_type_difference_should_fail(self, validator: MessageValidator, context: ScenarioContext) -> None:
        with pytest.raises(MessageValidationError):
            validator.validate_payload('{"a": 1}', '{"a": "1"}', context)

    def test_placeholders_should_work_in_json(self, validator: MessageValidator, context: ScenarioContext) -> None:
        validator.validate_payload(
            '{"id": "@variable(\'orderId\')@", "created": "@ignore@"}',
            '{"id": 42, "created": "2026-01-01"}',
            context,
        )

        assert context.get_variable("orderId") == "42"


class TestMessageValidation:
    """Test suite for MessageValidator.validate()."""

    def test_missing_expected_header_should_fail(
        self, validator: MessageValidator, context: ScenarioContext
    ) -> None:
        expected = Message(headers={"X-Operation": "send"})

        with pytest.raises(MessageValidationError, match="Missing header"):
            validator.validate(expected, Message(payload="x"), context)

    def test_header_names_should_be_case_insensitive(
        self, validator: MessageValidator, context: ScenarioContext
    ) -> None:
        expected = Message(headers={"x-operation": "send"})

        validator.validate(expected, Message(headers={"X-Operation": "send"}), context)

    def test_payload_check_can_be_disabled(self, validator: MessageValidator, context: ScenarioContext) -> None:
        validator.validate(
            Message(payload="<a>1</a>"),
            Message(payload="<b>2</b>"),
            context,
            validate_payload=False,
        )

    def test_empty_expected_payload_should_accept_anything(
        self, validator: MessageValidator, context: ScenarioContext
    ) -> None:
        validator.validate(Message(), Message(payload="anything"), context)

    def test_plain_text_should_be_compared_trimmed(
        self, validator: MessageValidator, context: ScenarioContext
    ) -> None:
        validator.validate(Message(payload="ping"), Message(payload="  ping\n"), context)
