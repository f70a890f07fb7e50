"""请求校验.

约定:
- 按 path → query → body 的固定顺序检查已声明部分,字段按声明顺序检查.
- 收集全部字段错误后一次性返回,不会在第一条错误处中断.
- 不做任何类型转换: query/path 保持传输层给出的字符串,body 保持解析后的值.
- 未声明的字段原样放行.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError
from app.schemas.formats import FORMAT_LABELS
from app.schemas.payload_models import CompiledTarget, compile_request_schema
from app.schemas.rules import (
    ROOT_FIELD,
    FieldType,
    FieldViolation,
    RequestSchema,
    Target,
    ViolationRule,
)
from app.types.requests import ApiRequest
from app.types.structures import JsonValue

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

_TYPE_LABELS: Mapping[FieldType, str] = {
    FieldType.STRING: "字符串",
    FieldType.NUMBER: "数字",
    FieldType.BOOLEAN: "布尔值",
    FieldType.OBJECT: "对象",
}

# pydantic 错误类型 -> 规则条目,未列出的一律视为类型错误
_RULE_BY_ERROR_TYPE: Mapping[str, ViolationRule] = {
    "missing": ViolationRule.REQUIRED,
    "string_too_short": ViolationRule.EMPTY,
    "value_error": ViolationRule.FORMAT,
}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """一次校验的结果.

    request 为原请求(仅追加 validated_targets 标注),violations 为空时表示校验通过.
    """

    request: ApiRequest
    violations: tuple[FieldViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    def raise_for_violations(self) -> ApiRequest:
        """存在错误时抛出 ValidationError,否则返回请求."""
        if self.violations:
            raise ValidationError(
                violations=self.violations,
                extra={"violation_count": len(self.violations)},
            )
        return self.request


def _extract(request: ApiRequest, target: Target) -> JsonValue:
    if target is Target.PATH:
        return dict(request.path_params)
    if target is Target.QUERY:
        return dict(request.query)
    # 缺失的请求体按空对象处理,必填字段由 required 规则报告
    return {} if request.body is None else request.body


def _violation_message(compiled: CompiledTarget, path: str, rule: ViolationRule) -> str:
    if path == ROOT_FIELD:
        return f'"{compiled.target.value}" 必须为对象'
    if rule is ViolationRule.REQUIRED:
        return f'"{path}" 为必填字段'
    if rule is ViolationRule.EMPTY:
        return f'"{path}" 不能为空字符串'
    field_rule = compiled.rules_by_path.get(path)
    if field_rule is None:
        return f'"{path}" 取值不合法'
    if rule is ViolationRule.FORMAT:
        label = FORMAT_LABELS.get(field_rule.format or "", field_rule.format)
        return f'"{path}" 不是合法的{label}'
    return f'"{path}" 必须为{_TYPE_LABELS[field_rule.type]}'


def _to_violation(compiled: CompiledTarget, error: ErrorDetails) -> FieldViolation:
    path = ".".join(str(part) for part in error["loc"]) or ROOT_FIELD
    # dict 字段内部的错误归到声明过的最近一级字段
    while path not in compiled.rules_by_path and "." in path:
        path = path.rsplit(".", 1)[0]
    rule = _RULE_BY_ERROR_TYPE.get(error["type"], ViolationRule.TYPE)
    if path == ROOT_FIELD:
        rule = ViolationRule.TYPE
    return FieldViolation(compiled.target, path, rule, _violation_message(compiled, path, rule))


def _check_target(compiled: CompiledTarget, data: JsonValue) -> list[FieldViolation]:
    try:
        compiled.model.model_validate(data)
    except PydanticValidationError as exc:
        return [_to_violation(compiled, error) for error in exc.errors(include_url=False)]
    return []


def validate(schema: RequestSchema | None, request: ApiRequest) -> ValidationResult:
    """按 schema 校验请求,返回全部字段错误.

    Args:
        schema: 路由的校验规则,为 None 时不做任何校验.
        request: 已完成路由匹配的请求.

    Returns:
        ValidationResult;校验通过时 request 会标注 validated_targets,字段值保持不变.

    """
    if schema is None:
        return ValidationResult(request=request)

    violations: list[FieldViolation] = []
    checked: list[str] = []
    for compiled in compile_request_schema(schema).targets:
        checked.append(compiled.target.value)
        violations.extend(_check_target(compiled, _extract(request, compiled.target)))

    if violations:
        return ValidationResult(request=request, violations=tuple(violations))
    return ValidationResult(request=replace(request, validated_targets=tuple(checked)))


__all__ = ["ValidationResult", "validate"]
