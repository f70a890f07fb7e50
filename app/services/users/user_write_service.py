"""用户写操作 Service.

职责:
- 处理用户的创建/更新/删除编排
- 负责邮箱唯一性检查与密码加密
- 调用 repository 执行 add/delete
- 不返回 Response

字段的必填/类型/格式校验已在路由流水线中完成,这里不再重复.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.constants.system_constants import ErrorMessages
from app.core.exceptions import ConflictError, NotFoundError
from app.models.user import User
from app.repositories.users_repository import UsersRepository
from app.utils.structlog_config import log_info

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.types.structures import JsonValue


@dataclass(slots=True)
class UserDeleteOutcome:
    """用户删除结果."""

    user_id: str
    email: str


class UserWriteService:
    """用户写操作服务."""

    def __init__(self, repository: UsersRepository | None = None) -> None:
        """初始化服务并注入用户仓库."""
        self._repository = repository or UsersRepository()

    def create(self, payload: Mapping[str, JsonValue]) -> User:
        """创建用户,字段按校验通过的原值保存."""
        name = str(payload["name"])
        email = str(payload["email"])

        with self._repository.transaction():
            self._ensure_email_unique(email, resource=None)
            user = User(name=name, email=email)
            user.set_password(str(payload["password"]))
            self._repository.add(user)

        self._log_create(user)
        return user

    def update(self, user_id: str, payload: Mapping[str, JsonValue]) -> User:
        """更新用户,只修改请求体中出现的字段."""
        with self._repository.transaction():
            user = self._get_or_error(user_id)
            changed: list[str] = []

            if "email" in payload:
                email = str(payload["email"])
                self._ensure_email_unique(email, resource=user)
                user.email = email
                changed.append("email")
            if "name" in payload:
                user.name = str(payload["name"])
                changed.append("name")
            if "password" in payload:
                user.set_password(str(payload["password"]))
                changed.append("password")

            if changed:
                user.touch()
            self._repository.add(user)

        self._log_update(user, changed)
        return user

    def delete(self, user_id: str) -> UserDeleteOutcome:
        """删除用户."""
        with self._repository.transaction():
            user = self._get_or_error(user_id)
            outcome = UserDeleteOutcome(user_id=user.id, email=user.email)
            self._repository.delete(user)

        self._log_delete(outcome)
        return outcome

    def _ensure_email_unique(self, email: str, *, resource: User | None) -> None:
        existing = self._repository.get_by_email(email)
        if existing and (resource is None or existing.id != resource.id):
            raise ConflictError(ErrorMessages.EMAIL_EXISTS, message_key="EMAIL_EXISTS", extra={"email": email})

    def _get_or_error(self, user_id: str) -> User:
        user = self._repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError(ErrorMessages.USER_NOT_FOUND, message_key="USER_NOT_FOUND", extra={"user_id": user_id})
        return user

    @staticmethod
    def _log_create(user: User) -> None:
        log_info("创建用户成功", module="users", target_user_id=user.id, email=user.email)

    @staticmethod
    def _log_update(user: User, changed: list[str]) -> None:
        log_info("更新用户成功", module="users", target_user_id=user.id, changed_fields=changed)

    @staticmethod
    def _log_delete(outcome: UserDeleteOutcome) -> None:
        log_info("删除用户", module="users", deleted_user_id=outcome.user_id, deleted_email=outcome.email)
