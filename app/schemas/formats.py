"""字符串语义格式校验.

FieldRule.format 只允许取本模块登记过的名称,注册 schema 时会据此拒绝未知格式.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from types import MappingProxyType

# 邮箱模式
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def is_email(value: str) -> bool:
    """判断字符串是否为合法邮箱地址."""
    return bool(EMAIL_PATTERN.match(value))


FORMAT_CHECKERS: Mapping[str, Callable[[str], bool]] = MappingProxyType({"email": is_email})

FORMAT_LABELS: Mapping[str, str] = MappingProxyType({"email": "邮箱地址"})


def is_supported_format(name: str) -> bool:
    return name in FORMAT_CHECKERS


__all__ = ["EMAIL_PATTERN", "FORMAT_CHECKERS", "FORMAT_LABELS", "is_email", "is_supported_format"]
