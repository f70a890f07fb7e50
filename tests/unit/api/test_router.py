"""Router 注册冲突与路径匹配测试."""

import pytest

from app.api.router import Router, parse_pattern
from app.api.v1.users import register_user_routes
from app.core.exceptions import ConfigurationError
from app.schemas.rules import SchemaKey


def _router_with_users() -> Router:
    router = Router()
    register_user_routes(router)
    return router


@pytest.mark.unit
def test_named_segment_binds_path_component() -> None:
    matched = _router_with_users().match("GET", "/users/42")

    assert matched is not None
    assert matched.route.handler_id == "get_user"
    assert dict(matched.path_params) == {"id": "42"}


@pytest.mark.unit
def test_same_pattern_is_reused_across_methods() -> None:
    router = _router_with_users()

    handlers = {method: router.match(method, "/users/abc").route.handler_id for method in ("GET", "PUT", "DELETE")}

    assert handlers == {"GET": "get_user", "PUT": "update_user", "DELETE": "delete_user"}


@pytest.mark.unit
def test_method_is_case_insensitive_and_trailing_slash_ignored() -> None:
    matched = _router_with_users().match("delete", "/users/abc/")

    assert matched is not None
    assert matched.route.method == "DELETE"
    assert matched.path_params["id"] == "abc"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("DELETE", "/users/abc/extra"),
        ("DELETE", "/users"),
        ("POST", "/users/1"),
        ("GET", "/accounts"),
        ("PATCH", "/users/1"),
        ("GET", "/"),
    ],
)
def test_unmatched_requests_return_none(method, path) -> None:
    assert _router_with_users().match(method, path) is None


@pytest.mark.unit
def test_empty_component_never_binds_named_segment() -> None:
    router = Router()
    router.register("GET", "/users/:id/posts", schema_key=None, handler_id="posts")

    assert router.match("GET", "/users//posts") is None
    assert router.match("GET", "/users/7/posts").path_params == {"id": "7"}


@pytest.mark.unit
def test_matching_does_not_depend_on_registration_order() -> None:
    forward = Router()
    forward.register("GET", "/users/me/settings", schema_key=None, handler_id="settings")
    forward.register("GET", "/users/:id", schema_key=None, handler_id="detail")

    backward = Router()
    backward.register("GET", "/users/:id", schema_key=None, handler_id="detail")
    backward.register("GET", "/users/me/settings", schema_key=None, handler_id="settings")

    for router in (forward, backward):
        assert router.match("GET", "/users/me/settings").route.handler_id == "settings"
        assert router.match("GET", "/users/me").route.handler_id == "detail"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("first", "second"),
    [
        ("/users/:id", "/users/:user_id"),
        ("/users/:id", "/users/me"),
        ("/:kind/list", "/users/:action"),
        ("/users", "/users/"),
    ],
)
def test_overlapping_patterns_for_same_method_conflict(first, second) -> None:
    router = Router()
    router.register("GET", first, schema_key=None, handler_id="a")

    with pytest.raises(ConfigurationError, match="路由冲突"):
        router.register("GET", second, schema_key=None, handler_id="b")


@pytest.mark.unit
def test_same_pattern_for_different_methods_is_allowed() -> None:
    router = Router()
    router.register("GET", "/users/:id", schema_key=None, handler_id="a")
    router.register("PUT", "/users/:id", schema_key=SchemaKey("users", "update"), handler_id="b")

    assert len(router.routes()) == 2


@pytest.mark.unit
@pytest.mark.parametrize(
    ("method", "pattern"),
    [
        ("PATCH", "/users"),
        ("GET", "users"),
        ("GET", "/users/:"),
        ("GET", "/users/:1d"),
        ("GET", "/users/:id/:id"),
        ("GET", "/users//list"),
    ],
)
def test_invalid_declarations_are_rejected(method, pattern) -> None:
    with pytest.raises(ConfigurationError):
        Router().register(method, pattern, schema_key=None, handler_id="h")


@pytest.mark.unit
def test_register_after_freeze_is_rejected() -> None:
    router = _router_with_users()
    router.freeze()

    with pytest.raises(ConfigurationError, match="已冻结"):
        router.register("GET", "/health", schema_key=None, handler_id="health")


@pytest.mark.unit
def test_routes_keep_registration_order_and_openapi_form() -> None:
    routes = _router_with_users().routes()

    assert [(r.method, r.pattern) for r in routes] == [
        ("GET", "/users"),
        ("POST", "/users"),
        ("GET", "/users/:id"),
        ("PUT", "/users/:id"),
        ("DELETE", "/users/:id"),
    ]
    assert routes[2].openapi_path == "/users/{id}"
    assert routes[2].param_names == ("id",)


@pytest.mark.unit
def test_parse_pattern_for_root() -> None:
    assert parse_pattern("/") == ()


@pytest.mark.unit
def test_error_statuses_are_normalized_and_checked() -> None:
    router = Router()

    route = router.register("POST", "/items", schema_key=None, handler_id="create_item", error_statuses=[409, 409, 422])

    assert route.error_statuses == (409, 422)
    with pytest.raises(ConfigurationError, match="未知状态码"):
        router.register("PUT", "/items/:id", schema_key=None, handler_id="update_item", error_statuses=[799])
    with pytest.raises(ConfigurationError, match="错误状态码"):
        router.register("DELETE", "/items/:id", schema_key=None, handler_id="delete_item", error_statuses=[204])
