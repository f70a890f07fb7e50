"""OpenAPI 文档生成测试."""

import pytest

from app.api.openapi import ApiSurfaceComposer
from app.api.router import Router
from app.api.v1.users import register_user_routes
from app.schemas.registry import SchemaRegistry
from app.schemas.rules import FieldRule, FieldType, RequestSchema, SchemaKey
from app.schemas.users import register_user_schemas


def _composer(**kwargs) -> ApiSurfaceComposer:
    registry = SchemaRegistry()
    register_user_schemas(registry)
    router = Router()
    register_user_routes(router)
    options = {"title": "Top Coding SAP API", "version": "1.0.0", "base_path": "/v1"}
    options.update(kwargs)
    return ApiSurfaceComposer(router, registry, **options)


@pytest.mark.unit
def test_document_lists_every_route() -> None:
    document = _composer(server_url="http://localhost:3000").describe()

    assert document["openapi"] == "3.0.0"
    assert document["info"]["title"] == "Top Coding SAP API"
    assert document["servers"] == [{"url": "http://localhost:3000"}]
    assert list(document["paths"]) == ["/v1/users", "/v1/users/{id}"]
    assert list(document["paths"]["/v1/users"]) == ["get", "post"]
    assert list(document["paths"]["/v1/users/{id}"]) == ["get", "put", "delete"]


@pytest.mark.unit
def test_create_operation_renders_required_fields_and_formats() -> None:
    operation = _composer().describe()["paths"]["/v1/users"]["post"]

    body_schema = operation["requestBody"]["content"]["application/json"]["schema"]
    assert operation["operationId"] == "create_user"
    assert operation["requestBody"]["required"] is True
    assert body_schema["required"] == ["name", "email", "password"]
    assert body_schema["properties"]["email"]["format"] == "email"
    assert "application/x-www-form-urlencoded" in operation["requestBody"]["content"]
    assert list(operation["responses"]) == ["201", "400", "409", "404", "500"]
    assert operation["responses"]["409"] == {"description": "Conflict"}


@pytest.mark.unit
def test_update_operation_has_optional_body_and_path_parameter() -> None:
    operation = _composer().describe()["paths"]["/v1/users/{id}"]["put"]

    body_schema = operation["requestBody"]["content"]["application/json"]["schema"]
    assert operation["requestBody"]["required"] is False
    assert "required" not in body_schema
    assert operation["parameters"] == [
        {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}},
    ]


@pytest.mark.unit
def test_get_operation_documents_path_and_optional_query_id() -> None:
    operation = _composer().describe()["paths"]["/v1/users/{id}"]["get"]

    locations = [(p["name"], p["in"], p["required"]) for p in operation["parameters"]]
    assert locations == [("id", "path", True), ("id", "query", False)]
    assert "requestBody" not in operation


@pytest.mark.unit
def test_route_without_schema_has_no_bad_request_response() -> None:
    operation = _composer().describe()["paths"]["/v1/users"]["get"]

    assert set(operation["responses"]) == {"200", "404", "500"}
    assert "parameters" not in operation


@pytest.mark.unit
def test_nested_object_fields_are_rendered() -> None:
    registry = SchemaRegistry()
    key = SchemaKey("profiles", "update")
    registry.register(
        key,
        RequestSchema(
            body={
                "address": FieldRule(
                    FieldType.OBJECT,
                    required=True,
                    nested={"city": FieldRule(FieldType.STRING, required=True)},
                ),
            },
        ),
    )
    router = Router()
    router.register("PUT", "/profiles/:id", schema_key=key, handler_id="update_profile")

    document = ApiSurfaceComposer(router, registry, title="t", version="1").describe()

    address = document["paths"]["/profiles/{id}"]["put"]["requestBody"]["content"]["application/json"]["schema"][
        "properties"
    ]["address"]
    assert address["type"] == "object"
    assert address["required"] == ["city"]
    assert address["properties"]["city"]["type"] == "string"


@pytest.mark.unit
def test_describe_is_deterministic_and_read_only() -> None:
    composer = _composer()
    routes_before = composer.router.routes()

    assert composer.describe() == composer.describe()
    assert composer.router.routes() == routes_before
    assert "servers" not in composer.describe()


@pytest.mark.unit
def test_declared_error_statuses_are_documented_per_route() -> None:
    paths = _composer().describe()["paths"]

    assert "409" in paths["/v1/users/{id}"]["put"]["responses"]
    assert "409" not in paths["/v1/users/{id}"]["get"]["responses"]
    assert "409" not in paths["/v1/users/{id}"]["delete"]["responses"]
