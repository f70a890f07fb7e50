"""用户服务 API 路由表.

约定:
- 路径模式使用 `/:name` 命名段,匹配按段数精确比较,字面段需相等,命名段绑定任意非空段.
- 同一 method 下可能匹配同一路径的两个模式视为声明冲突,在注册时抛出 ConfigurationError.
- 匹配结果与注册顺序无关;routes() 的顺序只用于生成文档.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from app.constants import HttpMethod, HttpStatus
from app.core.exceptions import ConfigurationError
from app.schemas.rules import SchemaKey
from app.utils.structlog_config import get_system_logger

logger = get_system_logger()

PARAM_PREFIX = ":"


def _split(path: str) -> tuple[str, ...]:
    stripped = path.strip("/")
    if not stripped:
        return ()
    return tuple(stripped.split("/"))


@dataclass(frozen=True, slots=True)
class Segment:
    """路径模式中的一段."""

    value: str
    is_param: bool = False

    def to_openapi(self) -> str:
        return f"{{{self.value}}}" if self.is_param else self.value


def parse_pattern(pattern: str) -> tuple[Segment, ...]:
    """解析路径模式为段列表,非法模式抛出 ConfigurationError."""
    if not isinstance(pattern, str) or not pattern.startswith("/"):
        raise ConfigurationError(f"路径模式必须以 / 开头: {pattern!r}")

    segments: list[Segment] = []
    seen: set[str] = set()
    for raw in _split(pattern):
        if not raw:
            raise ConfigurationError(f"路径模式存在空段: {pattern!r}")
        if raw.startswith(PARAM_PREFIX):
            name = raw[len(PARAM_PREFIX) :]
            if not name.isidentifier():
                raise ConfigurationError(f"非法的路径参数名 {name!r}: {pattern!r}")
            if name in seen:
                raise ConfigurationError(f"路径参数 {name!r} 重复: {pattern!r}")
            seen.add(name)
            segments.append(Segment(name, is_param=True))
        else:
            segments.append(Segment(raw))
    return tuple(segments)


def _parse_error_statuses(codes: Iterable[int], *, method: str, pattern: str) -> tuple[HttpStatus, ...]:
    statuses: list[HttpStatus] = []
    for code in codes:
        try:
            status = HttpStatus(code)
        except ValueError:
            raise ConfigurationError(f"路由 {method} {pattern} 声明了未知状态码: {code!r}") from None
        if status < HttpStatus.BAD_REQUEST:
            raise ConfigurationError(f"路由 {method} {pattern} 的 error_statuses 只能包含错误状态码: {code!r}")
        if status not in statuses:
            statuses.append(status)
    return tuple(statuses)


@dataclass(frozen=True, slots=True)
class Route:
    """一条路由声明.

    Attributes:
        method: 大写 HTTP 方法.
        pattern: 原始路径模式,例如 `/users/:id`.
        segments: 解析后的段.
        schema_key: 校验 schema 的注册键,None 表示不校验.
        handler_id: 处理函数标识.
        summary: 文档摘要.
        description: 文档描述.
        error_statuses: handler 自身可能返回的错误状态码(例如 409),写入文档.

    """

    method: str
    pattern: str
    segments: tuple[Segment, ...]
    schema_key: SchemaKey | None
    handler_id: str
    summary: str = ""
    description: str = ""
    error_statuses: tuple[HttpStatus, ...] = ()

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(segment.value for segment in self.segments if segment.is_param)

    @property
    def openapi_path(self) -> str:
        return "/" + "/".join(segment.to_openapi() for segment in self.segments)

    def bind(self, parts: tuple[str, ...]) -> dict[str, str] | None:
        """按段匹配路径,成功时返回绑定的命名段."""
        if len(parts) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for segment, part in zip(self.segments, parts, strict=True):
            if segment.is_param:
                if not part:
                    return None
                params[segment.value] = part
            elif segment.value != part:
                return None
        return params

    def overlaps(self, other: Route) -> bool:
        """判断两个模式是否可能匹配同一路径."""
        if len(self.segments) != len(other.segments):
            return False
        return all(
            left.is_param or right.is_param or left.value == right.value
            for left, right in zip(self.segments, other.segments, strict=True)
        )


@dataclass(frozen=True, slots=True)
class RouteMatch:
    route: Route
    path_params: Mapping[str, str]


class Router:
    """method + 路径模式 -> Route 的路由表."""

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._by_method: dict[str, list[Route]] = {}
        self._frozen = False

    def register(
        self,
        method: str,
        pattern: str,
        *,
        schema_key: SchemaKey | None,
        handler_id: str,
        summary: str = "",
        description: str = "",
        error_statuses: Iterable[int] = (),
    ) -> Route:
        """注册路由.

        Raises:
            ConfigurationError: method 不受支持、模式非法、错误状态码非法、与已注册模式冲突或路由表已冻结.

        """
        if self._frozen:
            raise ConfigurationError(f"路由表已冻结,无法注册: {method} {pattern}")
        normalized_method = HttpMethod.normalize(method)
        if not HttpMethod.is_valid(normalized_method):
            raise ConfigurationError(f"不支持的 HTTP 方法: {method!r}")
        if not handler_id:
            raise ConfigurationError(f"路由 {method} {pattern} 缺少 handler_id")

        route = Route(
            method=normalized_method,
            pattern=pattern,
            segments=parse_pattern(pattern),
            schema_key=schema_key,
            handler_id=handler_id,
            summary=summary,
            description=description,
            error_statuses=_parse_error_statuses(error_statuses, method=normalized_method, pattern=pattern),
        )
        candidates = self._by_method.setdefault(normalized_method, [])
        for existing in candidates:
            if existing.overlaps(route):
                raise ConfigurationError(
                    f"路由冲突: {normalized_method} {pattern} 与 {existing.pattern}",
                    extra={"method": normalized_method, "pattern": pattern, "existing": existing.pattern},
                )
        candidates.append(route)
        self._routes.append(route)
        logger.debug(
            "route_registered",
            module="router",
            method=normalized_method,
            pattern=pattern,
            handler=handler_id,
            schema_key=str(schema_key) if schema_key else None,
        )
        return route

    def match(self, method: str, path: str) -> RouteMatch | None:
        """查找匹配的路由,未命中时返回 None."""
        parts = _split(path)
        for route in self._by_method.get(HttpMethod.normalize(method), ()):
            params = route.bind(parts)
            if params is not None:
                return RouteMatch(route=route, path_params=MappingProxyType(params))
        return None

    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen


__all__ = ["Route", "RouteMatch", "Router", "Segment", "parse_pattern"]
