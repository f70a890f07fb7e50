"""请求校验测试.

覆盖必填/类型/空串/格式/嵌套规则,以及"收集全部错误"与"未声明字段放行"的约定。
"""

import pytest

from app.core.exceptions import ValidationError
from app.schemas.rules import FieldRule, FieldType, RequestSchema, Target, ViolationRule
from app.schemas.users import CREATE_USER_SCHEMA, GET_USER_SCHEMA, UPDATE_USER_SCHEMA
from app.schemas.validation import validate


def _fields(result):
    return [(v.target, v.field, v.rule) for v in result.violations]


@pytest.mark.unit
def test_create_user_with_bad_email_reports_every_violation(make_request) -> None:
    result = validate(CREATE_USER_SCHEMA, make_request(body={"email": "not-an-email"}))

    assert not result.ok
    assert _fields(result) == [
        (Target.BODY, "name", ViolationRule.REQUIRED),
        (Target.BODY, "email", ViolationRule.FORMAT),
        (Target.BODY, "password", ViolationRule.REQUIRED),
    ]


@pytest.mark.unit
def test_missing_required_field_is_named_in_violation(make_request) -> None:
    result = validate(CREATE_USER_SCHEMA, make_request(body={"name": "Ann", "email": "ann@example.com"}))

    assert [v.field for v in result.violations] == ["password"]
    assert "password" in result.violations[0].message


@pytest.mark.unit
def test_valid_request_passes_unchanged(make_request) -> None:
    body = {"name": "Ann", "email": "ann@example.com", "password": "secret", "nickname": "annie"}
    request = make_request(body=body)

    result = validate(CREATE_USER_SCHEMA, request)

    assert result.ok
    assert result.request.body == body
    assert result.request.body is request.body
    assert result.request.validated_targets == ("body",)
    assert result.raise_for_violations() is result.request


@pytest.mark.unit
def test_undeclared_fields_never_produce_violations(make_request) -> None:
    result = validate(UPDATE_USER_SCHEMA, make_request(method="PUT", body={"role": 1, "extra": {"a": None}}))

    assert result.ok


@pytest.mark.unit
def test_validate_is_idempotent(make_request) -> None:
    request = make_request(body={"email": 42, "name": ""})

    first = validate(CREATE_USER_SCHEMA, request)
    second = validate(CREATE_USER_SCHEMA, request)

    assert first.violations == second.violations
    assert request.validated_targets == ()


@pytest.mark.unit
def test_type_mismatch_skips_format_check(make_request) -> None:
    result = validate(CREATE_USER_SCHEMA, make_request(body={"name": "Ann", "email": 42, "password": "x"}))

    assert _fields(result) == [(Target.BODY, "email", ViolationRule.TYPE)]


@pytest.mark.unit
def test_empty_string_is_rejected_unless_allowed(make_request) -> None:
    strict = RequestSchema(body={"name": FieldRule(FieldType.STRING)})
    relaxed = RequestSchema(body={"name": FieldRule(FieldType.STRING, allow_empty=True, format="email")})

    assert _fields(validate(strict, make_request(body={"name": ""}))) == [(Target.BODY, "name", ViolationRule.EMPTY)]
    assert validate(relaxed, make_request(body={"name": ""})).ok


@pytest.mark.unit
def test_null_value_is_a_type_violation(make_request) -> None:
    result = validate(UPDATE_USER_SCHEMA, make_request(method="PUT", body={"name": None}))

    assert _fields(result) == [(Target.BODY, "name", ViolationRule.TYPE)]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("field_type", "good", "bad"),
    [
        (FieldType.NUMBER, 1.5, True),
        (FieldType.NUMBER, 3, "3"),
        (FieldType.NUMBER, 0, float("nan")),
        (FieldType.BOOLEAN, False, 0),
        (FieldType.OBJECT, {}, []),
    ],
)
def test_scalar_type_checks_do_not_coerce(make_request, field_type, good, bad) -> None:
    schema = RequestSchema(body={"value": FieldRule(field_type)})

    assert validate(schema, make_request(body={"value": good})).ok
    assert _fields(validate(schema, make_request(body={"value": bad}))) == [(Target.BODY, "value", ViolationRule.TYPE)]


@pytest.mark.unit
def test_nested_object_rules_report_dotted_paths(make_request) -> None:
    schema = RequestSchema(
        body={
            "address": FieldRule(
                FieldType.OBJECT,
                required=True,
                nested={
                    "city": FieldRule(FieldType.STRING, required=True),
                    "zip": FieldRule(FieldType.NUMBER),
                },
            ),
        },
    )

    result = validate(schema, make_request(body={"address": {"zip": "x"}}))

    assert _fields(result) == [
        (Target.BODY, "address.city", ViolationRule.REQUIRED),
        (Target.BODY, "address.zip", ViolationRule.TYPE),
    ]


@pytest.mark.unit
def test_non_object_body_reports_root_type_violation(make_request) -> None:
    result = validate(CREATE_USER_SCHEMA, make_request(body=["name"]))

    assert _fields(result) == [(Target.BODY, "$", ViolationRule.TYPE)]


@pytest.mark.unit
def test_missing_body_is_treated_as_empty_object(make_request) -> None:
    result = validate(CREATE_USER_SCHEMA, make_request(body=None))

    assert [v.rule for v in result.violations] == [ViolationRule.REQUIRED] * 3


@pytest.mark.unit
def test_violations_are_collected_across_targets(make_request) -> None:
    schema = RequestSchema(
        path={"id": FieldRule(FieldType.STRING, required=True)},
        query={"verbose": FieldRule(FieldType.STRING, required=True)},
        body={"name": FieldRule(FieldType.STRING, required=True)},
    )

    result = validate(schema, make_request(path_params={"id": "7"}, body={}))

    assert _fields(result) == [
        (Target.QUERY, "verbose", ViolationRule.REQUIRED),
        (Target.BODY, "name", ViolationRule.REQUIRED),
    ]


@pytest.mark.unit
def test_get_user_schema_checks_query_not_path(make_request) -> None:
    request = make_request(method="GET", path="/users/123", path_params={"id": "123"})

    result = validate(GET_USER_SCHEMA, request)

    assert result.ok
    assert result.request.path_params == {"id": "123"}
    assert result.request.validated_targets == ("query",)


@pytest.mark.unit
def test_no_schema_means_no_validation(make_request) -> None:
    request = make_request(body="anything")

    result = validate(None, request)

    assert result.ok
    assert result.request is request


@pytest.mark.unit
def test_raise_for_violations_carries_all_violations(make_request) -> None:
    result = validate(CREATE_USER_SCHEMA, make_request(body={}))

    with pytest.raises(ValidationError) as exc_info:
        result.raise_for_violations()

    assert exc_info.value.violations == result.violations
    assert exc_info.value.extra == {"violation_count": 3}
