"""SchemaRegistry 注册与查找行为测试."""

import pytest

from app.core.exceptions import ConfigurationError
from app.schemas.registry import SchemaRegistry
from app.schemas.rules import FieldRule, FieldType, RequestSchema, SchemaKey
from app.schemas.users import CREATE_USER, DELETE_USER, GET_USER, UPDATE_USER, register_user_schemas

_KEY = SchemaKey("widgets", "create")
_SCHEMA = RequestSchema(body={"name": FieldRule(FieldType.STRING, required=True)})


@pytest.mark.unit
def test_register_then_lookup_returns_same_schema() -> None:
    registry = SchemaRegistry()
    registry.register(_KEY, _SCHEMA)

    assert registry.lookup(_KEY) is _SCHEMA
    assert _KEY in registry
    assert len(registry) == 1


@pytest.mark.unit
def test_lookup_missing_key_returns_none() -> None:
    registry = SchemaRegistry()

    assert registry.lookup(SchemaKey("widgets", "missing")) is None
    assert registry.lookup(None) is None


@pytest.mark.unit
def test_duplicate_registration_fails_fast() -> None:
    registry = SchemaRegistry()
    registry.register(_KEY, _SCHEMA)

    with pytest.raises(ConfigurationError, match="重复注册"):
        registry.register(SchemaKey("widgets", "create"), RequestSchema())


@pytest.mark.unit
def test_register_after_freeze_is_rejected() -> None:
    registry = SchemaRegistry()
    registry.freeze()

    with pytest.raises(ConfigurationError, match="已冻结"):
        registry.register(_KEY, _SCHEMA)
    assert registry.frozen is True


@pytest.mark.unit
def test_register_rejects_non_schema_values() -> None:
    registry = SchemaRegistry()

    with pytest.raises(ConfigurationError):
        registry.register("widgets.create", _SCHEMA)  # type: ignore[arg-type]
    with pytest.raises(ConfigurationError):
        registry.register(_KEY, {"name": "string"})  # type: ignore[arg-type]


@pytest.mark.unit
def test_user_schemas_are_registered_in_declaration_order() -> None:
    registry = SchemaRegistry()
    register_user_schemas(registry)

    assert registry.keys() == [CREATE_USER, GET_USER, UPDATE_USER, DELETE_USER]
    assert str(CREATE_USER) == "users.create"


@pytest.mark.unit
def test_user_schemas_keep_query_id_on_get_and_delete() -> None:
    registry = SchemaRegistry()
    register_user_schemas(registry)

    for key in (GET_USER, DELETE_USER):
        schema = registry.lookup(key)
        assert schema is not None
        assert schema.path is None
        assert schema.body is None
        assert list(schema.query) == ["id"]
        assert schema.query["id"].required is False
