"""用户服务 - 常量定义模块

统一管理错误分类、严重度与提示文案.
"""

from enum import Enum


class LogLevel(Enum):
    """日志级别枚举."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorCategory(Enum):
    """错误分类枚举."""

    VALIDATION = "validation"
    BUSINESS = "business"
    CONFIGURATION = "configuration"
    ROUTING = "routing"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """错误严重程度枚举."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# 错误消息常量
class ErrorMessages:
    """错误消息常量."""

    # 通用错误
    INTERNAL_ERROR = "服务器内部错误"
    VALIDATION_ERROR = "数据验证失败"
    RESOURCE_NOT_FOUND = "资源不存在"
    ROUTE_NOT_FOUND = "请求的接口不存在"
    METHOD_NOT_ALLOWED = "请求方法不被允许"
    INVALID_REQUEST = "无效的请求"
    INVALID_JSON = "请求体不是合法的 JSON"
    CONFIGURATION_ERROR = "服务配置错误"

    # 业务错误
    USER_NOT_FOUND = "用户不存在"
    EMAIL_EXISTS = "邮箱已被使用"
    CONSTRAINT_VIOLATION = "数据约束错误"


# 成功消息常量
class SuccessMessages:
    """成功消息常量."""

    OPERATION_SUCCESS = "操作成功"

    USER_LISTED = "获取用户列表成功"
    USER_FETCHED = "获取用户信息成功"
    USER_CREATED = "用户创建成功"
    USER_UPDATED = "用户更新成功"
    USER_DELETED = "用户删除成功"


__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "LogLevel",
    "SuccessMessages",
]
