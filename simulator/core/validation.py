"""
Message validation.

Compares received messages with expected control messages. XML, JSON and
plain text payloads are supported, with @ignore@ and @variable('name')@
placeholders.

Dependencies: xml.etree, json (stdlib)
System role: Expected-request verification for scenario receive steps
"""

import json
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any

from simulator.core.dictionary import local_name
from simulator.core.exceptions import MessageValidationError
from simulator.core.message import Message
from simulator.core.variables import ScenarioContext

logger = logging.getLogger(__name__)

IGNORE_PLACEHOLDER = "@ignore@"
VARIABLE_PLACEHOLDER = re.compile(r"^@variable\(\s*['\"]?([\w.\-]+)['\"]?\s*\)@$")


class MessageValidator:
    """Validates received messages against expected payloads and headers."""

    def validate(
        self,
        expected: Message,
        actual: Message,
        context: ScenarioContext,
        validate_payload: bool = True,
    ) -> None:
        """
        Validate headers and payload of a received message.

        Args:
            expected: Control message; payload and headers may hold placeholders
            actual: Received message
            context: Scenario context for variables
            validate_payload: Skip payload comparison when False

        Raises:
            MessageValidationError: On the first mismatch
        """
        self.validate_headers(expected.headers, actual, context)
        if validate_payload and expected.payload.strip():
            self.validate_payload(context.replace(expected.payload), actual.payload, context)
        logger.debug("Message validation successful")

    def validate_headers(
        self,
        expected: dict[str, str],
        actual: Message,
        context: ScenarioContext,
    ) -> None:
        for name, expected_value in expected.items():
            actual_value = actual.header(name)
            if actual_value is None:
                raise MessageValidationError(
                    f"Missing header '{name}'",
                    path=f"header:{name}",
                    expected=expected_value,
                )
            self._compare_value(
                context.replace(expected_value), actual_value, f"header:{name}", context
            )

    def validate_payload(self, expected: str, actual: str, context: ScenarioContext) -> None:
        """
        Validate a payload, choosing the strategy from the expected content.

        Raises:
            MessageValidationError: On mismatch or unparseable received payload
        """
        stripped = expected.strip()
        if stripped == IGNORE_PLACEHOLDER:
            return
        if stripped.startswith("<"):
            self._validate_xml(stripped, actual, context)
        elif stripped.startswith(("{", "[")):
            self._validate_json(stripped, actual, context)
        else:
            self._compare_value(stripped, actual.strip(), "payload", context)

    def _compare_value(
        self,
        expected: str,
        actual: str,
        path: str,
        context: ScenarioContext,
    ) -> None:
        if expected == IGNORE_PLACEHOLDER:
            return
        match = VARIABLE_PLACEHOLDER.match(expected)
        if match:
            context.set_variable(match.group(1), actual, resolve=False)
            return
        if expected != actual:
            raise MessageValidationError(
                f"Values not equal for '{path}'",
                path=path,
                expected=expected,
                actual=actual,
            )

    def _validate_xml(self, expected: str, actual: str, context: ScenarioContext) -> None:
        try:
            expected_root = ET.fromstring(expected)
        except ET.ParseError as e:
            raise MessageValidationError(f"Expected XML payload is not well-formed: {e}") from e
        try:
            actual_root = ET.fromstring(actual.strip())
        except ET.ParseError as e:
            raise MessageValidationError(
                f"Received payload is not well-formed XML: {e}",
                actual=actual,
            ) from e
        self._compare_elements(expected_root, actual_root, local_name(expected_root.tag), context)

    def _compare_elements(
        self,
        expected: ET.Element,
        actual: ET.Element,
        path: str,
        context: ScenarioContext,
    ) -> None:
        if expected.tag != actual.tag:
            raise MessageValidationError(
                f"Element names not equal at '{path}'",
                path=path,
                expected=expected.tag,
                actual=actual.tag,
            )

        expected_text = (expected.text or "").strip()
        if expected_text == IGNORE_PLACEHOLDER:
            return

        if set(expected.attrib) != set(actual.attrib):
            raise MessageValidationError(
                f"Attributes not equal at '{path}'",
                path=path,
                expected=sorted(expected.attrib),
                actual=sorted(actual.attrib),
            )
        for name, value in expected.attrib.items():
            self._compare_value(value, actual.attrib[name], f"{path}/@{local_name(name)}", context)

        expected_children = list(expected)
        actual_children = list(actual)
        if len(expected_children) != len(actual_children):
            raise MessageValidationError(
                f"Number of child elements not equal at '{path}'",
                path=path,
                expected=len(expected_children),
                actual=len(actual_children),
            )

        if not expected_children:
            self._compare_value(expected_text, (actual.text or "").strip(), path, context)

        for expected_child, actual_child in zip(expected_children, actual_children):
            child_path = f"{path}.{local_name(expected_child.tag)}"
            self._compare_elements(expected_child, actual_child, child_path, context)

    def _validate_json(self, expected: str, actual: str, context: ScenarioContext) -> None:
        try:
            expected_data = json.loads(expected)
        except ValueError as e:
            raise MessageValidationError(f"Expected JSON payload is invalid: {e}") from e
        try:
            actual_data = json.loads(actual)
        except ValueError as e:
            raise MessageValidationError(
                f"Received payload is not valid JSON: {e}",
                actual=actual,
            ) from e
        self._compare_json(expected_data, actual_data, "$", context)

    def _compare_json(self, expected: Any, actual: Any, path: str, context: ScenarioContext) -> None:
        if isinstance(expected, str) and (
            expected == IGNORE_PLACEHOLDER or VARIABLE_PLACEHOLDER.match(expected)
        ):
            self._compare_value(expected, _json_text(actual), path, context)
            return

        if isinstance(expected, dict):
            if not isinstance(actual, dict):
                raise MessageValidationError(
                    f"Expected JSON object at '{path}'", path=path, actual=_json_text(actual)
                )
            if set(expected) != set(actual):
                raise MessageValidationError(
                    f"JSON keys not equal at '{path}'",
                    path=path,
                    expected=sorted(expected),
                    actual=sorted(actual),
                )
            for key, value in expected.items():
                self._compare_json(value, actual[key], f"{path}.{key}", context)
            return

        if isinstance(expected, list):
            if not isinstance(actual, list):
                raise MessageValidationError(
                    f"Expected JSON array at '{path}'", path=path, actual=_json_text(actual)
                )
            if len(expected) != len(actual):
                raise MessageValidationError(
                    f"JSON array size not equal at '{path}'",
                    path=path,
                    expected=len(expected),
                    actual=len(actual),
                )
            for index, (item, actual_item) in enumerate(zip(expected, actual)):
                self._compare_json(item, actual_item, f"{path}[{index}]", context)
            return

        if isinstance(expected, str):
            expected = context.replace(expected)
            if not isinstance(actual, str) or expected != actual:
                raise MessageValidationError(
                    f"Values not equal for '{path}'",
                    path=path,
                    expected=expected,
                    actual=_json_text(actual),
                )
            return

        if expected != actual or type(expected) is not type(actual):
            raise MessageValidationError(
                f"Values not equal for '{path}'",
                path=path,
                expected=expected,
                actual=actual,
            )


def _json_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)
