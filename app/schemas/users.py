"""用户资源的请求校验规则."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.schemas.rules import FieldRule, FieldType, RequestSchema, SchemaKey

if TYPE_CHECKING:
    from app.schemas.registry import SchemaRegistry

USERS_RESOURCE = "users"

CREATE_USER = SchemaKey(USERS_RESOURCE, "create")
GET_USER = SchemaKey(USERS_RESOURCE, "get")
UPDATE_USER = SchemaKey(USERS_RESOURCE, "update")
DELETE_USER = SchemaKey(USERS_RESOURCE, "delete")

CREATE_USER_SCHEMA = RequestSchema(
    body={
        "name": FieldRule(FieldType.STRING, required=True, description="用户名称"),
        "email": FieldRule(FieldType.STRING, required=True, format="email", description="登录邮箱"),
        "password": FieldRule(FieldType.STRING, required=True, description="登录密码"),
    },
    description="创建用户",
)

# GET/DELETE 校验的是 query 中的 id 而不是路径参数,保持与既有接口一致
GET_USER_SCHEMA = RequestSchema(
    query={"id": FieldRule(FieldType.STRING, description="用户 ID")},
    description="获取用户",
)

UPDATE_USER_SCHEMA = RequestSchema(
    body={
        "name": FieldRule(FieldType.STRING, description="用户名称"),
        "email": FieldRule(FieldType.STRING, format="email", description="登录邮箱"),
        "password": FieldRule(FieldType.STRING, description="登录密码"),
    },
    description="更新用户",
)

DELETE_USER_SCHEMA = RequestSchema(
    query={"id": FieldRule(FieldType.STRING, description="用户 ID")},
    description="删除用户",
)


def register_user_schemas(registry: SchemaRegistry) -> None:
    """向注册表登记用户资源的全部 schema."""
    registry.register(CREATE_USER, CREATE_USER_SCHEMA)
    registry.register(GET_USER, GET_USER_SCHEMA)
    registry.register(UPDATE_USER, UPDATE_USER_SCHEMA)
    registry.register(DELETE_USER, DELETE_USER_SCHEMA)


__all__ = [
    "CREATE_USER",
    "DELETE_USER",
    "GET_USER",
    "UPDATE_USER",
    "USERS_RESOURCE",
    "register_user_schemas",
]
