"""请求分发流水线.

每条路由在启动时构建一份有序的步骤列表:
    [log_request_step, validation_step(schema)?] -> handler

步骤接收 ApiRequest 并返回(可能带标注的)ApiRequest;需要终止时抛出异常,
后续步骤与 handler 不再执行.handler 抛出的异常原样向上传递,由全局错误处理器渲染.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from flask import g, has_request_context

from app.core.exceptions import ConfigurationError, RouteNotFoundError
from app.schemas.validation import validate
from app.types.requests import ApiRequest
from app.utils.sensitive_data import scrub_sensitive_fields
from app.utils.structlog_config import get_api_logger, get_system_logger

if TYPE_CHECKING:
    from flask.typing import ResponseReturnValue

    from app.api.router import Route, Router
    from app.schemas.registry import SchemaRegistry
    from app.schemas.rules import RequestSchema
    from app.types.structures import JsonValue

Step = Callable[[ApiRequest], ApiRequest]
Handler = Callable[[ApiRequest], "ResponseReturnValue"]

logger = get_api_logger()


def make_log_request_step(route: Route) -> Step:
    """记录进入路由的请求,请求体先脱敏."""

    def log_request_step(request: ApiRequest) -> ApiRequest:
        logger.debug(
            "route_matched",
            module="pipeline",
            method=request.method,
            route=route.pattern,
            handler=route.handler_id,
            path_params=dict(request.path_params),
            query=scrub_sensitive_fields(request.query),
            body=scrub_sensitive_fields(request.body),
        )
        return request

    return log_request_step


def make_validation_step(schema: RequestSchema) -> Step:
    """按 schema 校验请求,存在任何字段错误时抛出 ValidationError."""

    def validation_step(request: ApiRequest) -> ApiRequest:
        result = validate(schema, request)
        if not result.ok:
            logger.info(
                "request_validation_failed",
                module="pipeline",
                path=request.path,
                violations=[violation.to_dict() for violation in result.violations],
            )
        return result.raise_for_violations()

    return validation_step


@dataclass(frozen=True, slots=True)
class RoutePlan:
    """一条路由的执行计划."""

    route: Route
    steps: tuple[Step, ...]
    handler: Handler


class Pipeline:
    """把 Router、SchemaRegistry 与 handler 表组装成可分发的流水线.

    构造时校验全部 handler_id 与 schema_key 均已登记,随后冻结路由表与注册表.
    """

    def __init__(self, router: Router, registry: SchemaRegistry, handlers: Mapping[str, Handler]) -> None:
        self.router = router
        self.registry = registry
        self._handlers = MappingProxyType(dict(handlers))
        self._plans: dict[tuple[str, str], RoutePlan] = {}

        for route in router.routes():
            handler = self._handlers.get(route.handler_id)
            if handler is None:
                raise ConfigurationError(
                    f"路由 {route.method} {route.pattern} 引用了未登记的 handler: {route.handler_id}",
                )
            steps: list[Step] = [make_log_request_step(route)]
            if route.schema_key is not None:
                schema = registry.lookup(route.schema_key)
                if schema is None:
                    raise ConfigurationError(
                        f"路由 {route.method} {route.pattern} 引用了未注册的 schema: {route.schema_key}",
                    )
                steps.append(make_validation_step(schema))
            self._plans[(route.method, route.pattern)] = RoutePlan(route, tuple(steps), handler)

        router.freeze()
        registry.freeze()
        get_system_logger().info("pipeline_ready", module="pipeline", routes=len(self._plans))

    def plan_for(self, route: Route) -> RoutePlan:
        return self._plans[(route.method, route.pattern)]

    def dispatch(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, str] | None = None,
        body: JsonValue = None,
        body_loader: Callable[[], JsonValue] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ResponseReturnValue:
        """匹配路由并依次执行步骤与 handler.

        body_loader 只在路由命中后调用,未命中的请求不会解析请求体.

        Raises:
            RouteNotFoundError: 没有匹配的路由,此时不执行任何步骤.
            ValidationError: 校验步骤失败,handler 不会被调用.

        """
        matched = self.router.match(method, path)
        if matched is None:
            raise RouteNotFoundError(extra={"method": method, "path": path})
        if body_loader is not None:
            body = body_loader()

        plan = self.plan_for(matched.route)
        if has_request_context():
            g.route_pattern = plan.route.pattern
            g.handler_id = plan.route.handler_id

        request = ApiRequest(
            method=plan.route.method,
            path=path,
            path_params=matched.path_params,
            query=dict(query or {}),
            body=body,
            headers=dict(headers or {}),
        )
        for step in plan.steps:
            request = step(request)
        return plan.handler(request)


__all__ = ["Handler", "Pipeline", "RoutePlan", "Step", "make_log_request_step", "make_validation_step"]
