"""常量模块。

集中管理所有系统常量，包括错误消息、HTTP 相关常量等。

主要常量：
- ErrorMessages: 错误消息常量
- HttpStatus: HTTP 状态码常量
- HttpMethod: 路由支持的 HTTP 方法
"""

# 导入所有系统常量
from .system_constants import (
    ErrorCategory,
    ErrorMessages,
    ErrorSeverity,
    LogLevel,
    SuccessMessages,
)

# 导入HTTP状态码常量（使用Python标准库）
from http import HTTPStatus as HttpStatus

# 导入HTTP头常量
from .http_headers import ContentTypes, HttpHeaders

# 导入HTTP方法常量
from .http_methods import HttpMethod

__all__ = [
    "ContentTypes",
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "HttpHeaders",
    "HttpMethod",
    "HttpStatus",
    "LogLevel",
    "SuccessMessages",
]
