"""
Scenario variables and inline functions.

Resolves ${name} variable references and sim:function(args) calls inside
payloads, headers and echo text.

Dependencies: re, random, uuid (stdlib)
System role: Test data generation for scenario messages
"""

import random
import re
import uuid
from datetime import datetime
from typing import Any, Callable

from simulator.core.exceptions import UnknownFunctionError, UnknownVariableError

VARIABLE_PATTERN = re.compile(r"\$\{([^}]+)\}")
FUNCTION_PATTERN = re.compile(r"sim:(\w+)\(([^()]*)\)")


def _random_number(length: str = "10") -> str:
    size = int(length)
    if size <= 0:
        return ""
    first = str(random.randint(1, 9))
    return first + "".join(str(random.randint(0, 9)) for _ in range(size - 1))


def _current_date(fmt: str = "%Y-%m-%dT%H:%M:%S") -> str:
    return datetime.now().strftime(fmt)


FUNCTIONS: dict[str, Callable[..., str]] = {
    "randomNumber": _random_number,
    "randomUUID": lambda: str(uuid.uuid4()),
    "currentDate": _current_date,
    "upperCase": lambda text="": text.upper(),
    "lowerCase": lambda text="": text.lower(),
    "concat": lambda *parts: "".join(parts),
}


def _parse_arguments(raw: str) -> list[str]:
    """Split a function argument list, honouring single and double quotes."""
    args: list[str] = []
    if not raw.strip():
        return args
    current = ""
    quote: str | None = None
    for char in raw:
        if quote:
            if char == quote:
                quote = None
            else:
                current += char
        elif char in ("'", '"'):
            quote = char
        elif char == ",":
            args.append(current.strip())
            current = ""
        else:
            current += char
    args.append(current.strip())
    return args


def _call_function(name: str, raw_arguments: str) -> str:
    function = FUNCTIONS.get(name)
    if function is None:
        raise UnknownFunctionError(name)
    return function(*_parse_arguments(raw_arguments))


class ScenarioContext:
    """Variable store shared by the steps of one scenario execution."""

    def __init__(self, variables: dict[str, Any] | None = None) -> None:
        self.variables: dict[str, str] = {
            name: str(value) for name, value in (variables or {}).items()
        }

    def set_variable(self, name: str, value: Any, resolve: bool = True) -> None:
        """
        Store a variable.

        Args:
            name: Variable name
            value: Value; strings are resolved first unless resolve is False
            resolve: False for values taken from received messages, stored verbatim
        """
        if resolve and isinstance(value, str):
            value = self.replace(value)
        self.variables[name] = str(value)

    def get_variable(self, name: str) -> str:
        """
        Get a variable value.

        Raises:
            UnknownVariableError: If the variable is not defined
        """
        try:
            return self.variables[name]
        except KeyError:
            raise UnknownVariableError(name) from None

    def has_variable(self, name: str) -> bool:
        return name in self.variables

    def replace_variables(self, text: str) -> str:
        return VARIABLE_PATTERN.sub(lambda m: self.get_variable(m.group(1).strip()), text)

    def replace_functions(self, text: str) -> str:
        return FUNCTION_PATTERN.sub(lambda m: _call_function(m.group(1), m.group(2)), text)

    def replace(self, text: str | None) -> str:
        """
        Resolve inline functions and variables in one pass over the template.

        Args:
            text: Raw text, None is treated as empty

        Returns:
            str: Text with all references resolved
        """
        if not text:
            return ""
        # Substituted values are never scanned again
        parts = []
        position = 0
        for match in FUNCTION_PATTERN.finditer(text):
            parts.append(self.replace_variables(text[position:match.start()]))
            parts.append(_call_function(match.group(1), self.replace_variables(match.group(2))))
            position = match.end()
        parts.append(self.replace_variables(text[position:]))
        return "".join(parts)
