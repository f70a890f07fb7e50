"""声明式校验规则的数据模型.

约定:
- FieldRule/RequestSchema 均为不可变的纯数据,不提供链式 builder,
  便于 OpenAPI 文档直接读取规则内容.
- schema 只约束声明过的字段,未声明字段既不校验也不拒绝.
- 结构非法的规则(未知类型/未知格式/格式挂在非字符串上等)在构造时即抛出 ConfigurationError.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from app.core.exceptions import ConfigurationError
from app.schemas.formats import is_supported_format

ROOT_FIELD = "$"


class FieldType(StrEnum):
    """字段取值类型."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"


class Target(StrEnum):
    """请求中被校验的部分,取值与 OpenAPI 的 `in` 对齐."""

    PATH = "path"
    QUERY = "query"
    BODY = "body"


class ViolationRule(StrEnum):
    """校验失败时命中的规则条目."""

    REQUIRED = "required"
    TYPE = "type"
    EMPTY = "empty"
    FORMAT = "format"


TARGET_ORDER: tuple[Target, ...] = (Target.PATH, Target.QUERY, Target.BODY)


def _freeze_fields(fields: Mapping[str, FieldRule] | None, *, owner: str) -> Mapping[str, FieldRule] | None:
    if fields is None:
        return None
    if not isinstance(fields, Mapping):
        raise ConfigurationError(f"{owner} 的字段声明必须为 mapping")
    frozen: dict[str, FieldRule] = {}
    for name, rule in fields.items():
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"{owner} 存在非法字段名: {name!r}")
        if not isinstance(rule, FieldRule):
            raise ConfigurationError(f"{owner}.{name} 必须为 FieldRule")
        frozen[name] = rule
    return MappingProxyType(frozen)


@dataclass(frozen=True, slots=True)
class FieldRule:
    """单个字段的约束.

    Attributes:
        type: 取值类型.
        required: 是否必填.
        format: 字符串的语义格式(例如 "email").
        nested: object 字段的子字段规则.
        allow_empty: 字符串是否允许为空串.
        description: 文档描述.

    """

    type: FieldType
    required: bool = False
    format: str | None = None
    nested: Mapping[str, FieldRule] | None = None
    allow_empty: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        try:
            field_type = FieldType(self.type)
        except ValueError:
            raise ConfigurationError(f"不支持的字段类型: {self.type!r}") from None
        object.__setattr__(self, "type", field_type)

        if self.format is not None:
            if field_type is not FieldType.STRING:
                raise ConfigurationError(f"format 仅适用于 string 字段,当前类型: {field_type}")
            if not is_supported_format(self.format):
                raise ConfigurationError(f"不支持的字段格式: {self.format!r}")

        if self.nested is not None and field_type is not FieldType.OBJECT:
            raise ConfigurationError(f"nested 仅适用于 object 字段,当前类型: {field_type}")
        object.__setattr__(self, "nested", _freeze_fields(self.nested, owner="nested"))


@dataclass(frozen=True, slots=True)
class RequestSchema:
    """一条路由的请求校验规则.

    path/query/body 为 None 表示不校验该部分;空 mapping 表示只要求该部分为对象.
    """

    path: Mapping[str, FieldRule] | None = None
    query: Mapping[str, FieldRule] | None = None
    body: Mapping[str, FieldRule] | None = None
    description: str = ""
    # 编译后的 pydantic 模型,见 app.schemas.payload_models
    compiled: object = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for target in TARGET_ORDER:
            object.__setattr__(self, target.value, _freeze_fields(getattr(self, target.value), owner=target.value))

    def rules_for(self, target: Target) -> Mapping[str, FieldRule] | None:
        return getattr(self, Target(target).value)

    def targets(self) -> Iterator[tuple[Target, Mapping[str, FieldRule]]]:
        """按 path → query → body 的固定顺序返回已声明的部分."""
        for target in TARGET_ORDER:
            rules = self.rules_for(target)
            if rules is not None:
                yield target, rules


@dataclass(frozen=True, slots=True, order=True)
class SchemaKey:
    """schema 的注册键: (resource, operation)."""

    resource: str
    operation: str

    def __str__(self) -> str:
        return f"{self.resource}.{self.operation}"


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """一条字段级校验错误."""

    target: Target
    field: str
    rule: ViolationRule
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "target": self.target.value,
            "field": self.field,
            "rule": self.rule.value,
            "message": self.message,
        }


__all__ = [
    "ROOT_FIELD",
    "TARGET_ORDER",
    "FieldRule",
    "FieldType",
    "FieldViolation",
    "RequestSchema",
    "SchemaKey",
    "Target",
    "ViolationRule",
]
