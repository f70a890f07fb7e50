"""用户服务的结构化日志配置与辅助函数.

处理器链: 调试过滤 -> 时间戳/级别 -> 异常格式化 -> 请求与路由上下文
-> 全局上下文 -> 敏感字段脱敏 -> 渲染.密码等字段在任何日志中都只以掩码出现.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, cast

import structlog
from flask import Flask, current_app, g, has_request_context

from app.constants.system_constants import ErrorSeverity
from app.settings import APP_VERSION
from app.types.structures import ContextDict, JsonValue, LoggerExtra, StructlogEventDict
from app.utils.logging.context_vars import request_id_var
from app.utils.logging.error_adapter import (
    ErrorContext,
    ErrorMetadata,
    build_public_context,
    derive_error_metadata,
    get_error_suggestions,
)
from app.utils.logging.handlers import DebugFilter
from app.utils.sensitive_data import scrub_sensitive_fields

if TYPE_CHECKING:
    from structlog.typing import BindableLogger, Processor

LogField = JsonValue | ContextDict | LoggerExtra
ErrorPayload = dict[str, LogField]

DEFAULT_LOGGER_NAME = "users_api"


class StructlogConfig:
    """进程级 structlog 配置,只装配一次处理器链.

    Flask 应用创建时再根据 `ENABLE_DEBUG_LOG` 打开或关闭调试事件.
    """

    def __init__(self) -> None:
        self.debug_filter = DebugFilter(enabled=False)
        self.configured = False

    def configure(self, app: Flask | None = None) -> None:
        if not self.configured:
            processors = [
                self.debug_filter,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                self._add_request_context,
                self._add_global_context,
                self._scrub_sensitive,
                self._get_renderer(),
            ]
            structlog.configure(
                processors=cast("list[structlog.types.Processor]", processors),
                context_class=dict,
                logger_factory=structlog.stdlib.LoggerFactory(),
                wrapper_class=structlog.stdlib.BoundLogger,
                cache_logger_on_first_use=True,
            )
            self.configured = True

        if app is not None:
            self.debug_filter.set_enabled(enabled=bool(app.config.get("ENABLE_DEBUG_LOG", False)))

    @staticmethod
    def _add_request_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """写入 request_id,路由已匹配时附带 route 与 handler."""
        if not has_request_context():
            return event_dict
        event_dict["request_id"] = request_id_var.get()
        route_pattern = getattr(g, "route_pattern", None)
        if route_pattern is not None:
            event_dict.setdefault("route", route_pattern)
            event_dict.setdefault("handler", getattr(g, "handler_id", None))
        return event_dict

    @staticmethod
    def _add_global_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        try:
            event_dict["app_name"] = current_app.config["APP_NAME"]
            event_dict["app_version"] = current_app.config["APP_VERSION"]
            event_dict["environment"] = current_app.config.get("ENV", "development")
        except RuntimeError:
            # 应用上下文之外(启动前/脚本)
            event_dict["app_name"] = DEFAULT_LOGGER_NAME
            event_dict["app_version"] = APP_VERSION

        event_dict["logger_name"] = getattr(_logger, "name", "unknown")
        return event_dict

    @staticmethod
    def _scrub_sensitive(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        return cast("StructlogEventDict", scrub_sensitive_fields(event_dict))

    @staticmethod
    def _get_renderer() -> Processor:
        """终端下使用彩色渲染,其余场景输出 JSON 行."""
        if sys.stdout.isatty():
            return structlog.dev.ConsoleRenderer(colors=True)
        return structlog.processors.JSONRenderer(ensure_ascii=False)


structlog_config = StructlogConfig()


def get_logger(name: str) -> structlog.BoundLogger:
    """获取结构化日志记录器(首次调用时完成全局配置)."""
    structlog_config.configure()
    return structlog.get_logger(name)


def configure_structlog(app: Flask) -> None:
    """按应用配置调整 structlog,并在应用上下文销毁时记录未处理异常."""
    structlog_config.configure(app)

    @app.teardown_appcontext
    def log_teardown_error(exception: BaseException | None) -> None:
        if exception:
            get_logger(DEFAULT_LOGGER_NAME).error("请求处理异常", module="system", exception=str(exception))


def _emit(
    level: str,
    message: str,
    module: str,
    exception: Exception | None,
    fields: dict[str, LogField],
) -> None:
    logger = get_logger(DEFAULT_LOGGER_NAME)
    if exception is None:
        getattr(logger, level)(message, module=module, **fields)
    elif level == "error":
        # error 级别保留堆栈
        logger.exception(message, module=module, error=str(exception), **fields)
    else:
        getattr(logger, level)(message, module=module, error=str(exception), **fields)


def log_info(message: str, module: str = "app", **kwargs: LogField) -> None:
    """记录信息级别日志.

    Example:
        >>> log_info("用户创建成功", module="users", user_id="0f3c...")

    """
    _emit("info", message, module, None, kwargs)


def log_warning(
    message: str,
    module: str = "app",
    exception: Exception | None = None,
    **kwargs: LogField,
) -> None:
    _emit("warning", message, module, exception, kwargs)


def log_error(
    message: str,
    module: str = "app",
    exception: Exception | None = None,
    **kwargs: LogField,
) -> None:
    """记录错误级别日志,携带异常时附带堆栈."""
    _emit("error", message, module, exception, kwargs)


def log_critical(
    message: str,
    module: str = "app",
    exception: Exception | None = None,
    **kwargs: LogField,
) -> None:
    _emit("critical", message, module, exception, kwargs)


def get_system_logger() -> structlog.BoundLogger:
    """启动期与注册表使用的 logger."""
    return get_logger("system")


def get_api_logger() -> structlog.BoundLogger:
    """请求分发期使用的 logger."""
    return get_logger("api")


def enhanced_error_handler(
    error: Exception,
    context: ErrorContext | None = None,
    *,
    extra: LoggerExtra | None = None,
) -> ErrorPayload:
    """把异常转换为统一错误封套的主体并按严重度记录日志.

    Args:
        error: 异常对象.
        context: 错误上下文,缺省时按当前请求生成.
        extra: 附加上下文,会原样写入 `extra`.

    Returns:
        包含 error_id、category、severity、message_code、message、
        timestamp、recoverable、suggestions 与 context 的字典.

    """
    context = context or ErrorContext(error)
    context.ensure_request()

    metadata = derive_error_metadata(error)
    payload: ErrorPayload = {
        "error": True,
        "error_id": context.error_id,
        "category": metadata.category.value,
        "severity": metadata.severity.value,
        "message_code": metadata.message_key,
        "message": metadata.message,
        "timestamp": context.timestamp.isoformat(),
        "recoverable": metadata.recoverable,
        "suggestions": get_error_suggestions(metadata.category),
        "context": build_public_context(context),
    }
    if extra:
        payload["extra"] = dict(extra)

    _log_enhanced_error(error, metadata, payload)
    return payload


_SEVERITY_LOGGERS = {
    ErrorSeverity.CRITICAL: log_critical,
    ErrorSeverity.HIGH: log_error,
}


def _log_enhanced_error(error: Exception, metadata: ErrorMetadata, payload: ErrorPayload) -> None:
    log_kwargs: dict[str, LogField] = {
        key: payload[key] for key in ("error_id", "category", "severity", "message_code", "context", "extra") if key in payload
    }
    log_func = _SEVERITY_LOGGERS.get(metadata.severity, log_warning)
    log_func(str(payload.get("message", "")), module="error_handler", exception=error, **log_kwargs)


__all__ = [
    "ErrorContext",
    "ErrorMetadata",
    "configure_structlog",
    "enhanced_error_handler",
    "get_api_logger",
    "get_logger",
    "get_system_logger",
    "log_critical",
    "log_error",
    "log_info",
    "log_warning",
]
