"""传输层无关的请求结构.

路由层从 Flask request 中取出 method/path/query/body,封装为不可变的 ApiRequest,
校验与业务处理只面向该结构,不直接读取 Flask 全局对象.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from app.types.structures import JsonValue


@dataclass(frozen=True, slots=True)
class ApiRequest:
    """一次入站请求的快照.

    Attributes:
        method: 大写的 HTTP 方法.
        path: 请求路径(不含 querystring).
        path_params: 路由匹配时绑定的命名段.
        query: 扁平的字符串 querystring.
        body: 解析后的请求体(JSON 或表单),缺失时为 None.
        headers: 请求头快照.
        validated_targets: 已通过校验的部分(path/query/body),仅作标注,不改写取值.

    """

    method: str
    path: str
    path_params: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    body: JsonValue = None
    headers: Mapping[str, str] = field(default_factory=dict)
    validated_targets: tuple[str, ...] = ()

    @property
    def body_mapping(self) -> Mapping[str, JsonValue]:
        """以 mapping 形式返回请求体,非对象时返回空字典."""
        return self.body if isinstance(self.body, Mapping) else {}


__all__ = ["ApiRequest"]
