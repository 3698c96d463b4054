"""
Scenario mappers.

Pluggable strategies that turn an inbound message into a scenario name
(the mapping key).

Dependencies: re, xml.etree (stdlib)
System role: Request to scenario routing
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Iterable, Protocol

from simulator.core.dictionary import local_name
from simulator.core.exceptions import MappingError
from simulator.core.message import Message
from simulator.core.registry import ScenarioRegistry
from simulator.core.scenario import RequestMapping

logger = logging.getLogger(__name__)


class ScenarioMapper(Protocol):
    """Strategy selecting the scenario that handles an inbound message."""

    def extract_mapping_key(self, message: Message) -> str | None:
        ...


def _segments(path: str | None) -> list[str]:
    return [segment for segment in (path or "").split("/") if segment]


class PathPattern:
    """
    Compiled request path template.

    {name} and * match exactly one segment, ** matches any remainder
    (including nothing).
    """

    def __init__(self, template: str) -> None:
        self.template = template
        self.segments = _segments(template)
        parts = []
        for segment in self.segments:
            if segment == "**":
                parts.append(r"(?:/.*)?")
            elif segment == "*" or re.fullmatch(r"\{[^/{}]+\}", segment):
                parts.append(r"/[^/]+")
            else:
                parts.append("/" + re.escape(segment))
        self._regex = re.compile("^" + "".join(parts) + "/?$")

    @property
    def literal_count(self) -> int:
        return sum(1 for s in self.segments if s not in ("*", "**") and not s.startswith("{"))

    @property
    def wildcard_count(self) -> int:
        return len(self.segments) - self.literal_count

    def matches(self, path: str | None) -> bool:
        normalized = "/" + "/".join(_segments(path))
        return bool(self._regex.match(normalized))

    def specificity(self) -> tuple[int, int]:
        """Sort key: more literal segments first, then fewer wildcards."""
        return (-self.literal_count, self.wildcard_count)


class RequestMappingScenarioMapper:
    """Matches method and path against the request mappings of registered scenarios."""

    def __init__(self, registry: ScenarioRegistry) -> None:
        self.registry = registry
        self._patterns: dict[str, PathPattern] = {}

    def _pattern(self, mapping: RequestMapping) -> PathPattern:
        pattern = self._patterns.get(mapping.path)
        if pattern is None:
            pattern = PathPattern(mapping.path)
            self._patterns[mapping.path] = pattern
        return pattern

    def extract_mapping_key(self, message: Message) -> str | None:
        candidates: list[tuple[tuple[int, int, int], str]] = []
        order = 0
        for name, scenario_cls in self.registry.items():
            for mapping in scenario_cls.request_mappings:
                order += 1
                if mapping.method and mapping.method != (message.method or "").upper():
                    continue
                pattern = self._pattern(mapping)
                if pattern.matches(message.path):
                    rank = pattern.specificity() + (order,)
                    candidates.append((rank, name))
        if not candidates:
            return None
        candidates.sort(key=lambda candidate: candidate[0])
        return candidates[0][1]


class HeaderValueScenarioMapper:
    """Uses the value of a message header as scenario name."""

    def __init__(self, header: str) -> None:
        self.header = header

    def extract_mapping_key(self, message: Message) -> str | None:
        value = message.header(self.header)
        return value.strip() if value else None


class RequestPathScenarioMapper:
    """Uses the first segment of the request path as scenario name."""

    def extract_mapping_key(self, message: Message) -> str | None:
        segments = _segments(message.path)
        return segments[0] if segments else None


class QueryParameterScenarioMapper:
    """Uses the value of a query parameter as scenario name."""

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter

    def extract_mapping_key(self, message: Message) -> str | None:
        value = message.query.get(self.parameter)
        return value.strip() if value else None


class XPathPayloadScenarioMapper:
    """
    Reads the scenario name from an XML payload.

    Without expression the root element's local name is used; otherwise the
    text of the first element found by the ElementTree path expression.
    """

    def __init__(
        self,
        expression: str | None = None,
        namespaces: dict[str, str] | None = None,
    ) -> None:
        self.expression = expression
        self.namespaces = namespaces or {}

    def extract_mapping_key(self, message: Message) -> str | None:
        payload = message.payload.strip()
        if not payload.startswith("<"):
            return None
        try:
            root = ET.fromstring(payload)
        except ET.ParseError as e:
            raise MappingError(f"Payload is not well-formed XML: {e}", strategy="xpath") from e

        if self.expression is None:
            return local_name(root.tag)

        element = root.find(self.expression, self.namespaces)
        if element is None or not (element.text or "").strip():
            return None
        return element.text.strip()


class SoapActionScenarioMapper:
    """Uses the SOAPAction header as scenario name."""

    def extract_mapping_key(self, message: Message) -> str | None:
        action = message.header("soapaction")
        if action is None:
            content_type = message.header("content-type", "")
            found = re.search(r'action="?([^";]+)"?', content_type)
            action = found.group(1) if found else None
        if not action:
            return None
        action = action.strip().strip('"')
        # URI actions: keep the last path segment
        action = action.rstrip("/").rsplit("/", 1)[-1]
        return action or None


class ChainScenarioMapper:
    """Tries several mappers in order and returns the first key found."""

    def __init__(self, mappers: Iterable[ScenarioMapper]) -> None:
        self.mappers = list(mappers)

    def extract_mapping_key(self, message: Message) -> str | None:
        for mapper in self.mappers:
            try:
                key = mapper.extract_mapping_key(message)
            except MappingError as e:
                logger.debug("Mapper %s skipped: %s", type(mapper).__name__, e)
                continue
            if key:
                return key
        return None


MAPPING_STRATEGIES = ("request-mapping", "header", "path", "query", "xpath", "soap-action", "chain")


def build_mapper(
    strategy: str,
    registry: ScenarioRegistry,
    header: str = "X-Simulator-Scenario",
    query_param: str = "scenario",
    xpath_expression: str | None = None,
    namespaces: dict[str, str] | None = None,
) -> ScenarioMapper:
    """
    Create the scenario mapper for a configured strategy name.

    The chain strategy tries header, request mapping, xpath and path in
    that order.

    Raises:
        ValueError: If the strategy is unknown
    """
    strategy = strategy.lower()
    if strategy == "request-mapping":
        return RequestMappingScenarioMapper(registry)
    if strategy == "header":
        return HeaderValueScenarioMapper(header)
    if strategy == "path":
        return RequestPathScenarioMapper()
    if strategy == "query":
        return QueryParameterScenarioMapper(query_param)
    if strategy == "xpath":
        return XPathPayloadScenarioMapper(xpath_expression, namespaces)
    if strategy == "soap-action":
        return SoapActionScenarioMapper()
    if strategy == "chain":
        return ChainScenarioMapper([
            HeaderValueScenarioMapper(header),
            RequestMappingScenarioMapper(registry),
            XPathPayloadScenarioMapper(xpath_expression, namespaces),
            RequestPathScenarioMapper(),
        ])
    raise ValueError(
        f"Unknown scenario mapping strategy '{strategy}', expected one of {', '.join(MAPPING_STRATEGIES)}"
    )
