"""请求校验 schema 注册表.

schema 在应用启动时一次性注册并冻结,请求期间只读.
"""

from __future__ import annotations

from collections.abc import Iterator

from app.core.exceptions import ConfigurationError
from app.schemas.payload_models import compile_request_schema
from app.schemas.rules import RequestSchema, SchemaKey
from app.utils.structlog_config import get_system_logger

logger = get_system_logger()


class SchemaRegistry:
    """(resource, operation) -> RequestSchema 的进程内注册表."""

    def __init__(self) -> None:
        self._schemas: dict[SchemaKey, RequestSchema] = {}
        self._frozen = False

    def register(self, key: SchemaKey, schema: RequestSchema) -> None:
        """注册 schema.

        Args:
            key: 注册键.
            schema: 请求校验规则.

        Raises:
            ConfigurationError: 键重复、注册表已冻结、参数类型不正确或规则无法编译时抛出.

        """
        if self._frozen:
            raise ConfigurationError(f"schema 注册表已冻结,无法注册: {key}")
        if not isinstance(key, SchemaKey):
            raise ConfigurationError(f"schema 注册键必须为 SchemaKey: {key!r}")
        if not isinstance(schema, RequestSchema):
            raise ConfigurationError(f"schema {key} 必须为 RequestSchema")
        if key in self._schemas:
            raise ConfigurationError(f"schema 重复注册: {key}", extra={"schema_key": str(key)})
        # 规则在注册时编译为 pydantic 模型,请求期间只读
        compile_request_schema(schema)
        self._schemas[key] = schema
        logger.debug("schema_registered", module="schemas", schema_key=str(key))

    def lookup(self, key: SchemaKey | None) -> RequestSchema | None:
        """返回已注册的 schema,不存在时返回 None(表示该路由不做校验)."""
        if key is None:
            return None
        return self._schemas.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def keys(self) -> list[SchemaKey]:
        return list(self._schemas)

    def items(self) -> Iterator[tuple[SchemaKey, RequestSchema]]:
        yield from self._schemas.items()


__all__ = ["SchemaRegistry"]
