"""OpenAPI 文档生成.

文档完全由 Router 与 SchemaRegistry 的只读状态推导,不引入新数据.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from app.constants import ContentTypes, HttpMethod, HttpStatus
from app.schemas.rules import FieldRule, FieldType

if TYPE_CHECKING:
    from app.api.router import Route, Router
    from app.schemas.registry import SchemaRegistry
    from app.schemas.rules import RequestSchema
    from app.settings import Settings
    from app.types.structures import JsonDict

OPENAPI_VERSION = "3.0.0"


def field_to_schema(rule: FieldRule) -> JsonDict:
    """把单个 FieldRule 渲染为 OpenAPI schema object."""
    schema: JsonDict = {"type": rule.type.value}
    if rule.format is not None:
        schema["format"] = rule.format
    if rule.description:
        schema["description"] = rule.description
    if rule.type is FieldType.STRING and not rule.allow_empty:
        schema["minLength"] = 1
    if rule.type is FieldType.OBJECT and rule.nested is not None:
        schema.update(fields_to_object_schema(rule.nested))
    return schema


def fields_to_object_schema(fields: Mapping[str, FieldRule]) -> JsonDict:
    schema: JsonDict = {
        "type": "object",
        "properties": {name: field_to_schema(rule) for name, rule in fields.items()},
    }
    required = [name for name, rule in fields.items() if rule.required]
    if required:
        schema["required"] = required
    return schema


class ApiSurfaceComposer:
    """把已注册路由与 schema 汇总为 OpenAPI 3.0 文档."""

    def __init__(
        self,
        router: Router,
        registry: SchemaRegistry,
        *,
        title: str,
        version: str,
        description: str = "",
        server_url: str | None = None,
        base_path: str = "",
    ) -> None:
        self.router = router
        self.registry = registry
        self.title = title
        self.version = version
        self.description = description
        self.server_url = server_url
        self.base_path = base_path.rstrip("/")

    @classmethod
    def from_settings(
        cls,
        router: Router,
        registry: SchemaRegistry,
        settings: Settings,
        *,
        base_path: str = "",
    ) -> ApiSurfaceComposer:
        return cls(
            router,
            registry,
            title=settings.api_title,
            version=settings.app_version,
            description=settings.api_description,
            server_url=settings.api_server_url,
            base_path=base_path,
        )

    def describe(self) -> JsonDict:
        """生成 OpenAPI 文档.

        Returns:
            OpenAPI 3.0.0 文档字典,paths 按注册顺序排列,命名段渲染为 `{name}`.

        """
        paths: JsonDict = {}
        for route in self.router.routes():
            path_item = paths.setdefault(f"{self.base_path}{route.openapi_path}", {})
            path_item[route.method.lower()] = self._operation(route)

        document: JsonDict = {
            "openapi": OPENAPI_VERSION,
            "info": {"title": self.title, "version": self.version, "description": self.description},
            "paths": paths,
        }
        if self.server_url:
            document["servers"] = [{"url": self.server_url}]
        return document

    def _operation(self, route: Route) -> JsonDict:
        schema = self.registry.lookup(route.schema_key)
        operation: JsonDict = {
            "operationId": route.handler_id,
            "summary": route.summary,
            "description": route.description or (schema.description if schema else ""),
        }
        parameters = self._parameters(route, schema)
        if parameters:
            operation["parameters"] = parameters
        if schema is not None and schema.body is not None:
            body_schema = fields_to_object_schema(schema.body)
            operation["requestBody"] = {
                "required": any(rule.required for rule in schema.body.values()),
                "content": {
                    ContentTypes.JSON: {"schema": body_schema},
                    ContentTypes.FORM_URLENCODED: {"schema": body_schema},
                },
            }
        operation["responses"] = self._responses(route, schema)
        return operation

    @staticmethod
    def _parameters(route: Route, schema: RequestSchema | None) -> list[JsonDict]:
        declared_path = schema.path if schema is not None and schema.path is not None else {}
        parameters: list[JsonDict] = []
        # 路径中的命名段始终是必填的 path 参数
        for name in route.param_names:
            rule = declared_path.get(name)
            parameters.append(
                {
                    "name": name,
                    "in": "path",
                    "required": True,
                    "schema": field_to_schema(rule) if rule else {"type": "string"},
                },
            )
        if schema is not None and schema.query is not None:
            for name, rule in schema.query.items():
                parameter: JsonDict = {
                    "name": name,
                    "in": "query",
                    "required": rule.required,
                    "schema": field_to_schema(rule),
                }
                if rule.description:
                    parameter["description"] = rule.description
                parameters.append(parameter)
        return parameters

    @staticmethod
    def _responses(route: Route, schema: RequestSchema | None) -> JsonDict:
        success = HttpStatus.CREATED if route.method == HttpMethod.POST else HttpStatus.OK
        codes = [success]
        if schema is not None:
            codes.append(HttpStatus.BAD_REQUEST)
        # handler 声明的业务错误(例如邮箱冲突 409)
        codes.extend(route.error_statuses)
        codes.extend((HttpStatus.NOT_FOUND, HttpStatus.INTERNAL_SERVER_ERROR))
        return {str(int(code)): {"description": HttpStatus(code).phrase} for code in dict.fromkeys(codes)}


__all__ = ["OPENAPI_VERSION", "ApiSurfaceComposer", "field_to_schema", "fields_to_object_schema"]
