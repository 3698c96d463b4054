"""
XML data dictionaries.

Translate element values of XML payloads using a properties file keyed by
dotted element paths (e.g. FaxMessage.status=QUEUED).

Dependencies: xml.etree (stdlib)
System role: Test data normalization for inbound and outbound messages
"""

import io
import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from simulator.core.variables import ScenarioContext

logger = logging.getLogger(__name__)

XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def local_name(tag: str) -> str:
    """Strip the {namespace} prefix of an ElementTree tag."""
    return tag.rsplit("}", 1)[-1]


def parse_properties(content: str) -> dict[str, str]:
    """
    Parse Java-style properties content.

    Supports key=value and key: value pairs, # and ! comments and
    blank lines. Keys and values are whitespace-trimmed.
    """
    properties: dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(("#", "!")):
            continue
        separators = [i for i in (line.find("="), line.find(":")) if i > 0]
        if not separators:
            properties[line] = ""
            continue
        index = min(separators)
        properties[line[:index].strip()] = line[index + 1:].strip()
    return properties


class XmlDataDictionary:
    """Element path to value mappings applied to XML payloads."""

    def __init__(self, mappings: dict[str, str] | None = None, name: str = "dictionary") -> None:
        self.mappings = dict(mappings or {})
        self.name = name

    @classmethod
    def from_file(cls, path: str | Path) -> "XmlDataDictionary":
        """
        Load a dictionary from a properties file.

        A missing file yields an empty dictionary.

        Args:
            path: Properties file location

        Returns:
            XmlDataDictionary: Loaded dictionary
        """
        file_path = Path(path)
        if not file_path.is_file():
            logger.debug("Data dictionary %s not found, using empty dictionary", file_path)
            return cls(name=str(file_path))
        mappings = parse_properties(file_path.read_text(encoding="utf-8"))
        logger.info("Loaded data dictionary %s with %d entries", file_path, len(mappings))
        return cls(mappings, name=str(file_path))

    def __len__(self) -> int:
        return len(self.mappings)

    def translate(self, payload: str, context: ScenarioContext | None = None) -> str:
        """
        Rewrite element text for every matching element path.

        Non-XML payloads and empty dictionaries are returned unchanged.

        Args:
            payload: Message payload
            context: Scenario context used to resolve values

        Returns:
            str: Translated payload
        """
        if not self.mappings or not payload.lstrip().startswith("<"):
            return payload

        try:
            root, namespaces = _parse_with_namespaces(payload)
        except ET.ParseError:
            logger.debug("Skipping dictionary %s for non well-formed payload", self.name)
            return payload

        changed = False
        for path, element in self._walk(root, local_name(root.tag)):
            if path in self.mappings:
                value = self.mappings[path]
                element.text = context.replace(value) if context else value
                changed = True

        if not changed:
            return payload
        return _serialize(payload, root, namespaces)

    def _walk(self, element: ET.Element, path: str):
        yield path, element
        for child in element:
            yield from self._walk(child, f"{path}.{local_name(child.tag)}")


def _parse_with_namespaces(payload: str) -> tuple[ET.Element, dict[str, str]]:
    """Parse a payload and collect its prefix to namespace declarations."""
    namespaces: dict[str, str] = {}
    root = None
    for event, item in ET.iterparse(io.StringIO(payload), events=("start-ns", "start")):
        if event == "start-ns":
            prefix, uri = item
            namespaces.setdefault(prefix, uri)
        elif root is None:
            root = item
    return root, namespaces


def _serialize(payload: str, root: ET.Element, namespaces: dict[str, str]) -> str:
    """
    Write a translated tree back with the payload's prefixes and declaration.

    Named prefixes are registered with ElementTree so peers matching on
    prefixed names still see them. The default namespace is kept when
    every element is qualified; ElementTree rejects it otherwise.
    """
    for prefix, uri in namespaces.items():
        if prefix and not re.fullmatch(r"ns\d+", prefix):
            ET.register_namespace(prefix, uri)

    default_uri = namespaces.get("")
    try:
        text = ET.tostring(root, encoding="unicode", default_namespace=default_uri)
    except ValueError:
        text = ET.tostring(root, encoding="unicode")

    declaration = XML_DECLARATION.match(payload)
    if declaration:
        text = f"{declaration.group(0).strip()}\n{text}"
    return text
