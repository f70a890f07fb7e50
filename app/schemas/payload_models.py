"""把 FieldRule 声明编译为 pydantic 模型.

约定:
- 每个已声明的 target(path/query/body)对应一个模型,基类忽略未声明字段.
- 全部使用 strict 类型,不做任何类型转换;模型输出不回写请求,只用于收集错误.
- 字段以 alias 绑定原始字段名,内部属性名与 BaseModel 自身属性不会冲突.
- 编译结果缓存在 RequestSchema 上,注册时即完成编译.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PydanticUserError,
    StrictBool,
    StrictFloat,
    StrictStr,
    create_model,
)

from app.core.exceptions import ConfigurationError
from app.schemas.formats import FORMAT_CHECKERS, FORMAT_LABELS
from app.schemas.rules import FieldRule, FieldType, RequestSchema, Target


class TargetPayload(BaseModel):
    """请求各部分模型的基类.

    未声明的字段原样放行,既不校验也不拒绝.
    """

    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True, slots=True)
class CompiledTarget:
    """一个 target 的编译产物.

    Attributes:
        target: 请求部分.
        model: 对应的 pydantic 模型.
        rules_by_path: 点分字段路径 -> FieldRule,用于生成错误文案.

    """

    target: Target
    model: type[BaseModel]
    rules_by_path: Mapping[str, FieldRule]


@dataclass(frozen=True, slots=True)
class CompiledSchema:
    targets: tuple[CompiledTarget, ...]


def _format_validator(format_name: str) -> AfterValidator:
    checker = FORMAT_CHECKERS[format_name]
    label = FORMAT_LABELS.get(format_name, format_name)

    def check_format(value: str) -> str:
        # allow_empty 放行的空串不做格式检查
        if value and not checker(value):
            raise ValueError(f"不是合法的{label}")
        return value

    return AfterValidator(check_format)


def _string_annotation(rule: FieldRule) -> Any:
    metadata: list[Any] = []
    if not rule.allow_empty:
        metadata.append(Field(min_length=1))
    if rule.format is not None:
        metadata.append(_format_validator(rule.format))
    if not metadata:
        return StrictStr
    return Annotated[(StrictStr, *metadata)]


def _annotation(rule: FieldRule, *, model_name: str, path: str, rules_by_path: dict[str, FieldRule]) -> Any:
    if rule.type is FieldType.STRING:
        return _string_annotation(rule)
    if rule.type is FieldType.BOOLEAN:
        return StrictBool
    if rule.type is FieldType.NUMBER:
        # strict float 接受 int,拒绝 bool 与数字字符串
        return Annotated[StrictFloat, Field(allow_inf_nan=False)]
    if rule.nested is None:
        return dict[str, Any]
    return _build_model(rule.nested, model_name=model_name, prefix=f"{path}.", rules_by_path=rules_by_path)


def _build_model(
    rules: Mapping[str, FieldRule],
    *,
    model_name: str,
    prefix: str,
    rules_by_path: dict[str, FieldRule],
) -> type[BaseModel]:
    field_definitions: dict[str, Any] = {}
    for index, (name, rule) in enumerate(rules.items()):
        path = f"{prefix}{name}"
        rules_by_path[path] = rule
        annotation = _annotation(
            rule,
            model_name=f"{model_name}_{index}",
            path=path,
            rules_by_path=rules_by_path,
        )
        if rule.required:
            field_info = Field(alias=name)
        else:
            field_info = Field(default=None, alias=name)
        field_definitions[f"field_{index}"] = (annotation, field_info)
    return create_model(model_name, __base__=TargetPayload, **field_definitions)


def compile_target(target: Target, rules: Mapping[str, FieldRule], *, name: str = "Request") -> CompiledTarget:
    """把单个 target 的字段规则编译为模型.

    Raises:
        ConfigurationError: pydantic 无法为规则生成模型时抛出.

    """
    rules_by_path: dict[str, FieldRule] = {}
    model_name = f"{name}{target.value.capitalize()}Payload"
    try:
        model = _build_model(rules, model_name=model_name, prefix="", rules_by_path=rules_by_path)
    except PydanticUserError as exc:
        raise ConfigurationError(f"{target.value} 规则无法编译: {exc}") from exc
    return CompiledTarget(target=target, model=model, rules_by_path=MappingProxyType(rules_by_path))


def compile_request_schema(schema: RequestSchema) -> CompiledSchema:
    """返回 schema 的编译结果,首次调用时编译并缓存."""
    cached = schema.compiled
    if isinstance(cached, CompiledSchema):
        return cached
    compiled = CompiledSchema(targets=tuple(compile_target(target, rules) for target, rules in schema.targets()))
    object.__setattr__(schema, "compiled", compiled)
    return compiled


__all__ = [
    "CompiledSchema",
    "CompiledTarget",
    "TargetPayload",
    "compile_request_schema",
    "compile_target",
]
