"""
OpenAPI scenario generation.

Reads an OpenAPI 3.x or Swagger 2.x document (JSON or YAML) and registers
one scenario per operation. Each generated scenario accepts any request on
its method and path and answers with a sample body built from the first
2xx response schema.

Dependencies: yaml (PyYAML), json
System role: Automatic REST scenarios from API contracts
"""

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml

from simulator.core.exceptions import OpenApiError
from simulator.core.registry import ScenarioRegistry
from simulator.core.scenario import RequestMapping, Scenario, ScenarioDesigner

logger = logging.getLogger(__name__)

_HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")
_MAX_REF_DEPTH = 10

_DEFAULT_SAMPLE_VALUES: dict[str, Any] = {
    "string": "sample_string",
    "integer": 1,
    "number": 1.5,
    "boolean": True,
}

_FORMAT_SAMPLE_VALUES: dict[str, Any] = {
    "uuid": "550e8400-e29b-41d4-a716-446655440000",
    "date-time": "2026-01-15T10:30:00Z",
    "date": "2026-01-15",
    "time": "10:30:00",
    "email": "user@example.com",
    "uri": "https://example.com/resource",
    "hostname": "example.com",
    "ipv4": "192.168.1.1",
    "ipv6": "::1",
    "int32": 1,
    "int64": 100,
    "float": 1.5,
    "double": 1.5,
    "byte": "dGVzdA==",
    "password": "secret",
}


class HttpOperationScenario(Scenario):
    """Scenario generated for one API operation."""

    response_status: int = 200
    response_payload: str = ""
    response_content_type: str | None = None

    def run(self, scenario: ScenarioDesigner) -> None:
        scenario.receive().validate(False)
        send = scenario.send().status(self.response_status).payload(self.response_payload)
        if self.response_content_type:
            send.content_type(self.response_content_type)


class OpenApiScenarioGenerator:
    """Turns API operations into registered scenarios."""

    def __init__(self, document: dict[str, Any], source: str | None = None) -> None:
        if not isinstance(document, dict) or "paths" not in document:
            raise OpenApiError("Document has no 'paths' section", source)
        self.document = document
        self.source = source
        self.is_swagger2 = str(document.get("swagger", "")).startswith("2")

    @classmethod
    def from_file(cls, path: str | Path) -> "OpenApiScenarioGenerator":
        """
        Load an OpenAPI document from a JSON or YAML file.

        Raises:
            OpenApiError: If the file is missing or cannot be parsed
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise OpenApiError("OpenAPI document not found", str(file_path))
        try:
            document = yaml.safe_load(file_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise OpenApiError(f"Failed to parse OpenAPI document: {e}", str(file_path)) from e
        return cls(document, source=str(file_path))

    @property
    def base_path(self) -> str:
        if self.is_swagger2:
            base = self.document.get("basePath") or ""
        else:
            servers = self.document.get("servers") or []
            base = urlparse(servers[0].get("url", "")).path if servers else ""
        return base.rstrip("/")

    def operations(self) -> list[tuple[str, str, dict[str, Any]]]:
        """List (method, path, operation) triples in document order."""
        result = []
        for path, item in (self.document.get("paths") or {}).items():
            if not isinstance(item, dict):
                continue
            for method in _HTTP_METHODS:
                operation = item.get(method)
                if isinstance(operation, dict):
                    result.append((method.upper(), path, operation))
        return result

    def generate(self, registry: ScenarioRegistry) -> list[str]:
        """
        Register one scenario per operation.

        Names already taken in the registry are skipped.

        Args:
            registry: Target registry

        Returns:
            list[str]: Names of the registered scenarios
        """
        names = []
        for method, path, operation in self.operations():
            name = operation.get("operationId") or f"{method}_{path}"
            if registry.contains(name):
                logger.warning("Skipping generated scenario %s: name already registered", name)
                continue

            status, payload, content_type = self._response(operation)
            scenario_cls = type(
                f"Generated_{len(names)}_{method}",
                (HttpOperationScenario,),
                {
                    "request_mappings": (RequestMapping(self.base_path + path, method),),
                    "response_status": status,
                    "response_payload": payload,
                    "response_content_type": content_type,
                    "__doc__": operation.get("summary") or operation.get("description"),
                },
            )
            registry.register(name, scenario_cls)
            names.append(name)

        logger.info(
            "Generated %d scenarios from %s", len(names), self.source or "OpenAPI document"
        )
        return names

    def _response(self, operation: dict[str, Any]) -> tuple[int, str, str | None]:
        responses = operation.get("responses") or {}
        success = sorted(code for code in map(str, responses) if code.startswith("2"))
        if success:
            code = success[0]
            response = responses.get(code, responses.get(int(code)) if code.isdigit() else None)
        else:
            code = "200"
            response = responses.get("default")
        status = int(code) if code.isdigit() else 200

        response = self._resolve(response or {})
        content_type, schema, example = self._response_schema(response)
        if example is not None:
            return status, _render(example), content_type
        if schema is None:
            return status, "", None
        return status, _render(self.sample(schema)), content_type

    def _response_schema(self, response: dict[str, Any]) -> tuple[str | None, dict | None, Any]:
        if self.is_swagger2:
            produces = self.document.get("produces") or ["application/json"]
            examples = response.get("examples") or {}
            example = next(iter(examples.values()), None)
            return produces[0], response.get("schema"), example

        content = response.get("content") or {}
        if not content:
            return None, None, None
        content_type = "application/json" if "application/json" in content else next(iter(content))
        media = content[content_type] or {}
        example = media.get("example")
        if example is None and media.get("examples"):
            first = next(iter(media["examples"].values()))
            example = self._resolve(first).get("value") if isinstance(first, dict) else None
        return content_type, media.get("schema"), example

    def _resolve(self, node: Any, depth: int = 0) -> Any:
        if not isinstance(node, dict) or "$ref" not in node:
            return node
        if depth > _MAX_REF_DEPTH:
            raise OpenApiError(f"Reference depth exceeded at {node['$ref']}", self.source)
        ref = node["$ref"]
        if not ref.startswith("#/"):
            raise OpenApiError(f"Only local references are supported: {ref}", self.source)
        target: Any = self.document
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(target, dict) or part not in target:
                raise OpenApiError(f"Unresolvable reference {ref}", self.source)
            target = target[part]
        return self._resolve(deepcopy(target), depth + 1)

    def sample(self, schema: dict[str, Any], depth: int = 0) -> Any:
        """
        Build a sample value for a JSON schema.

        Examples and defaults win over generated values; enums use their
        first entry. Recursion stops after a fixed depth.
        """
        if depth > _MAX_REF_DEPTH:
            return None
        schema = self._resolve(schema or {})

        for key in ("example", "default"):
            if key in schema:
                return schema[key]
        if schema.get("enum"):
            return schema["enum"][0]
        for combinator in ("allOf", "oneOf", "anyOf"):
            if schema.get(combinator):
                if combinator == "allOf":
                    merged: dict[str, Any] = {}
                    for part in schema["allOf"]:
                        value = self.sample(part, depth + 1)
                        if isinstance(value, dict):
                            merged.update(value)
                    return merged
                return self.sample(schema[combinator][0], depth + 1)

        schema_type = schema.get("type")
        if schema_type is None:
            schema_type = "object" if "properties" in schema else "string"
        if isinstance(schema_type, list):
            schema_type = next((t for t in schema_type if t != "null"), "string")

        if schema_type == "object":
            return {
                name: self.sample(prop, depth + 1)
                for name, prop in (schema.get("properties") or {}).items()
            }
        if schema_type == "array":
            return [self.sample(schema.get("items") or {}, depth + 1)]

        fmt = schema.get("format")
        if fmt in _FORMAT_SAMPLE_VALUES:
            value = _FORMAT_SAMPLE_VALUES[fmt]
            if schema_type == "string" and not isinstance(value, str):
                return str(value)
            return value
        return _DEFAULT_SAMPLE_VALUES.get(schema_type, "sample_string")


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)
