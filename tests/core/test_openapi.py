"""
Test suite for OpenApiScenarioGenerator.

Tests scenario generation from OpenAPI 3 and Swagger 2 documents, sample
payload generation and reference resolution.

System role: Verification of contract-driven REST scenarios
"""

import json
from pathlib import Path

import pytest

from simulator.core.endpoint import ScenarioEndpoint
from simulator.core.exceptions import OpenApiError
from simulator.core.executor import ScenarioExecutor
from simulator.core.mapping import RequestMappingScenarioMapper
from simulator.core.message import Message
from simulator.core.openapi import OpenApiScenarioGenerator
from simulator.core.registry import ScenarioRegistry

PETSTORE_YAML = """
openapi: 3.0.1
info:
  title: Petstore
  version: "1.0"
servers:
  - url: http://localhost/petstore/v1
paths:
  /pets/{petId}:
    get:
      operationId: getPetById
      summary: Find pet by ID
      responses:
        "200":
          description: ok
          content:
            application/json:
              schema:
                $ref: "#/components/schemas/Pet"
    delete:
      responses:
        "204":
          description: deleted
  /pets:
    post:
      operationId: addPet
      responses:
        "201":
          description: created
          content:
            application/json:
              example:
                id: 99
components:
  schemas:
    Pet:
      type: object
      properties:
        id:
          type: integer
          format: int64
        name:
          type: string
          example: doggie
        status:
          type: string
          enum: [available, pending, sold]
        tags:
          type: array
          items:
            type: string
"""


@pytest.fixture
def petstore_file(tmp_path: Path) -> Path:
    """Provide a YAML OpenAPI document on disk."""
    path = tmp_path / "petstore.yaml"
    path.write_text(PETSTORE_YAML, encoding="utf-8")
    return path


class TestGenerate:
    """Test suite for OpenApiScenarioGenerator.generate()."""

    def test_should_register_one_scenario_per_operation(
        self, petstore_file: Path, registry: ScenarioRegistry
    ) -> None:
        names = OpenApiScenarioGenerator.from_file(petstore_file).generate(registry)

        assert names == ["getPetById", "DELETE_/pets/{petId}", "addPet"]
        pet_scenario = registry.get("getPetById")
        assert pet_scenario.request_mappings[0].path == "/petstore/v1/pets/{petId}"
        assert pet_scenario.request_mappings[0].method == "GET"
        assert pet_scenario.__doc__ == "Find pet by ID"

    def test_sample_payload_should_follow_schema(self, petstore_file: Path, registry: ScenarioRegistry) -> None:
        OpenApiScenarioGenerator.from_file(petstore_file).generate(registry)

        pet = registry.get("getPetById")
        assert pet.response_status == 200
        assert pet.response_content_type == "application/json"
        assert json.loads(pet.response_payload) == {
            "id": 100,
            "name": "doggie",
            "status": "available",
            "tags": ["sample_string"],
        }

    def test_examples_and_empty_responses(self, petstore_file: Path, registry: ScenarioRegistry) -> None:
        OpenApiScenarioGenerator.from_file(petstore_file).generate(registry)

        assert json.loads(registry.get("addPet").response_payload) == {"id": 99}
        assert registry.get("addPet").response_status == 201
        deleted = registry.get("DELETE_/pets/{petId}")
        assert deleted.response_status == 204
        assert deleted.response_payload == ""

    def test_taken_names_should_be_skipped(self, petstore_file: Path, registry: ScenarioRegistry) -> None:
        generator = OpenApiScenarioGenerator.from_file(petstore_file)
        generator.generate(registry)

        assert generator.generate(registry) == []

    @pytest.mark.asyncio
    async def test_generated_scenario_should_answer_mapped_request(
        self, petstore_file: Path, registry: ScenarioRegistry, executor: ScenarioExecutor
    ) -> None:
        OpenApiScenarioGenerator.from_file(petstore_file).generate(registry)
        request = Message(method="GET", path="/petstore/v1/pets/12", payload="")
        name = RequestMappingScenarioMapper(registry).extract_mapping_key(request)
        endpoint = ScenarioEndpoint(name)
        reply = endpoint.deliver(request)

        await executor.run(name, endpoint)

        assert name == "getPetById"
        assert reply.result().status_code == 200
        assert reply.result().content_type == "application/json"


class TestSwagger2:
    """Test suite for Swagger 2 documents."""

    def test_base_path_and_schema(self, registry: ScenarioRegistry) -> None:
        document = {
            "swagger": "2.0",
            "basePath": "/api/",
            "produces": ["application/json"],
            "paths": {
                "/users": {
                    "get": {
                        "operationId": "listUsers",
                        "responses": {
                            "200": {
                                "description": "ok",
                                "schema": {"type": "array", "items": {"$ref": "#/definitions/User"}},
                            }
                        },
                    }
                }
            },
            "definitions": {
                "User": {"type": "object", "properties": {"email": {"type": "string", "format": "email"}}}
            },
        }

        OpenApiScenarioGenerator(document).generate(registry)

        users = registry.get("listUsers")
        assert users.request_mappings[0].path == "/api/users"
        assert json.loads(users.response_payload) == [{"email": "user@example.com"}]


class TestErrors:
    """Test suite for invalid documents."""

    def test_document_without_paths_should_raise(self) -> None:
        with pytest.raises(OpenApiError):
            OpenApiScenarioGenerator({"openapi": "3.0.0"})

    def test_missing_file_should_raise(self, tmp_path: Path) -> None:
        with pytest.raises(OpenApiError, match="not found"):
            OpenApiScenarioGenerator.from_file(tmp_path / "missing.yaml")

    def test_remote_reference_should_raise(self) -> None:
        generator = OpenApiScenarioGenerator({"paths": {}})

        with pytest.raises(OpenApiError, match="Only local references"):
            generator.sample({"$ref": "http://example.com/schema.json"})

    def test_unresolvable_reference_should_raise(self) -> None:
        generator = OpenApiScenarioGenerator({"paths": {}})

        with pytest.raises(OpenApiError, match="Unresolvable reference"):
            generator.sample({"$ref": "#/components/schemas/Missing"})
