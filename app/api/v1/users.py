"""Users 路由与处理函数.

路由表:
    GET    /users       -> list_users
    POST   /users       -> create_user   (users.create)
    GET    /users/:id   -> get_user      (users.get)
    PUT    /users/:id   -> update_user   (users.update)
    DELETE /users/:id   -> delete_user   (users.delete)

处理函数只在校验通过后被调用,入参为 ApiRequest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.constants import HttpMethod, HttpStatus
from app.constants.system_constants import SuccessMessages
from app.schemas.users import CREATE_USER, DELETE_USER, GET_USER, UPDATE_USER
from app.services.users import UserReadService, UserWriteService
from app.utils.response_utils import jsonify_unified_success
from app.utils.sensitive_data import scrub_sensitive_fields
from app.utils.structlog_config import log_info

if TYPE_CHECKING:
    from flask import Response

    from app.api.pipeline import Handler
    from app.api.router import Router
    from app.types.requests import ApiRequest

USERS_PATH = "/users"
USER_DETAIL_PATH = "/users/:id"


def register_user_routes(router: Router) -> None:
    """登记用户资源的全部路由."""
    router.register(
        HttpMethod.GET,
        USERS_PATH,
        schema_key=None,
        handler_id="list_users",
        summary="Get all users.",
        description="获取用户列表",
    )
    router.register(
        HttpMethod.POST,
        USERS_PATH,
        schema_key=CREATE_USER,
        handler_id="create_user",
        summary="Create a new user",
        error_statuses=(HttpStatus.CONFLICT,),
    )
    router.register(
        HttpMethod.GET,
        USER_DETAIL_PATH,
        schema_key=GET_USER,
        handler_id="get_user",
        summary="Get user by ID.",
    )
    router.register(
        HttpMethod.PUT,
        USER_DETAIL_PATH,
        schema_key=UPDATE_USER,
        handler_id="update_user",
        summary="Update user by ID.",
        error_statuses=(HttpStatus.CONFLICT,),
    )
    router.register(
        HttpMethod.DELETE,
        USER_DETAIL_PATH,
        schema_key=DELETE_USER,
        handler_id="delete_user",
        summary="Delete user by ID.",
    )


class UsersHandlers:
    """用户资源的处理函数集合."""

    def __init__(self, read_service: UserReadService, write_service: UserWriteService) -> None:
        self._read_service = read_service
        self._write_service = write_service

    def as_mapping(self) -> dict[str, Handler]:
        return {
            "list_users": self.list_users,
            "create_user": self.create_user,
            "get_user": self.get_user,
            "update_user": self.update_user,
            "delete_user": self.delete_user,
        }

    def list_users(self, request: ApiRequest) -> tuple[Response, int]:
        """获取用户列表."""
        users = self._read_service.list_users()
        return jsonify_unified_success(
            data={"items": [user.to_dict() for user in users], "total": len(users)},
            message=SuccessMessages.USER_LISTED,
        )

    def create_user(self, request: ApiRequest) -> tuple[Response, int]:
        """创建用户."""
        log_info("创建用户请求", module="users", request_data=scrub_sensitive_fields(request.body_mapping))
        user = self._write_service.create(request.body_mapping)
        return jsonify_unified_success(
            data={"user": user.to_dict()},
            message=SuccessMessages.USER_CREATED,
            status=HttpStatus.CREATED,
        )

    def get_user(self, request: ApiRequest) -> tuple[Response, int]:
        """获取用户信息."""
        user = self._read_service.get_user_or_error(request.path_params["id"])
        return jsonify_unified_success(data={"user": user.to_dict()}, message=SuccessMessages.USER_FETCHED)

    def update_user(self, request: ApiRequest) -> tuple[Response, int]:
        """更新用户."""
        user_id = request.path_params["id"]
        log_info(
            "更新用户请求",
            module="users",
            target_user_id=user_id,
            request_data=scrub_sensitive_fields(request.body_mapping),
        )
        user = self._write_service.update(user_id, request.body_mapping)
        return jsonify_unified_success(data={"user": user.to_dict()}, message=SuccessMessages.USER_UPDATED)

    def delete_user(self, request: ApiRequest) -> tuple[Response, int]:
        """删除用户."""
        outcome = self._write_service.delete(request.path_params["id"])
        return jsonify_unified_success(data={"id": outcome.user_id}, message=SuccessMessages.USER_DELETED)


__all__ = ["USERS_PATH", "USER_DETAIL_PATH", "UsersHandlers", "register_user_routes"]
