"""用户服务 - 统一异常定义(Shared Kernel).

说明:
- 本模块只负责定义异常类型与语义字段,不包含 HTTP/Flask/Werkzeug 等框架细节.
- 异常到 HTTP status 的映射应在 API/HTTP 边界完成(见 `app/api/error_mapping.py`).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

if TYPE_CHECKING:
    from app.schemas.rules import FieldViolation
    from app.types.structures import LoggerExtra


@dataclass(frozen=True, slots=True)
class ExceptionMetadata:
    """异常的元信息(不包含传输层信息)."""

    category: ErrorCategory
    severity: ErrorSeverity
    default_message_key: str


class AppError(Exception):
    """统一的基础业务异常.

    Args:
        message: 自定义错误文案,若为空则根据 ``message_key`` 推导.
        message_key: 自定义消息键.
        extra: 结构化日志附加字段.
        severity: 错误严重度.
        category: 错误分类.
    """

    metadata = ExceptionMetadata(
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="INTERNAL_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
        severity: ErrorSeverity | None = None,
        category: ErrorCategory | None = None,
    ) -> None:
        """初始化基础业务异常.

        Args:
            message: 直接使用的错误提示,缺省时会根据 message_key 推导.
            message_key: 覆盖默认 message_key 的可选值.
            extra: 结构化日志附加字段.
            severity: 错误严重度.
            category: 错误分类.
        """
        self.message_key = message_key or self.metadata.default_message_key
        self.message = message or getattr(ErrorMessages, self.message_key, ErrorMessages.INTERNAL_ERROR)
        self.extra = dict(extra or {})
        self.severity = severity or self.metadata.severity
        self.category = category or self.metadata.category
        super().__init__(self.message)

    @property
    def recoverable(self) -> bool:
        """表示该异常是否可恢复."""

        return self.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM)


class ConfigurationError(AppError):
    """表示路由或 schema 声明冲突/非法.

    仅在启动阶段抛出,进程不应带着错误配置继续启动.
    """

    metadata = ExceptionMetadata(
        category=ErrorCategory.CONFIGURATION,
        severity=ErrorSeverity.CRITICAL,
        default_message_key="CONFIGURATION_ERROR",
    )


class ValidationError(AppError):
    """表示输入参数或请求体验证失败.

    ``violations`` 保存本次请求收集到的全部字段错误,而不是第一条.
    """

    metadata = ExceptionMetadata(
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.LOW,
        default_message_key="VALIDATION_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        violations: Sequence[FieldViolation] = (),
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
    ) -> None:
        """初始化校验异常.

        Args:
            message: 错误提示,缺省为通用的"数据验证失败".
            violations: 字段级错误列表.
            message_key: 覆盖默认 message_key 的可选值.
            extra: 结构化日志附加字段.
        """
        super().__init__(message, message_key=message_key, extra=extra)
        self.violations: tuple[FieldViolation, ...] = tuple(violations)


class NotFoundError(AppError):
    """表示客户端请求的资源不存在或被删除."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.LOW,
        default_message_key="RESOURCE_NOT_FOUND",
    )


class RouteNotFoundError(NotFoundError):
    """表示 method + path 没有匹配到任何已注册路由."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.ROUTING,
        severity=ErrorSeverity.LOW,
        default_message_key="ROUTE_NOT_FOUND",
    )


class ConflictError(AppError):
    """表示资源状态冲突或违反唯一性约束."""

    metadata = ExceptionMetadata(
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="CONSTRAINT_VIOLATION",
    )


__all__ = [
    "AppError",
    "ConfigurationError",
    "ConflictError",
    "NotFoundError",
    "RouteNotFoundError",
    "ValidationError",
]
