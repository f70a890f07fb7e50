"""用户读取 Service.

职责:
- 组织 repository 调用
- 不做序列化/Response
"""

from __future__ import annotations

from app.constants.system_constants import ErrorMessages
from app.core.exceptions import NotFoundError
from app.models.user import User
from app.repositories.users_repository import UsersRepository


class UserReadService:
    """用户列表与详情读取服务."""

    def __init__(self, repository: UsersRepository | None = None) -> None:
        """初始化服务并注入用户仓库."""
        self._repository = repository or UsersRepository()

    def list_users(self) -> list[User]:
        """按创建时间返回全部用户."""
        return self._repository.list_users()

    def get_user_by_id(self, user_id: str) -> User | None:
        """按 ID 获取用户(可为空)."""
        return self._repository.get_by_id(user_id)

    def get_user_or_error(self, user_id: str) -> User:
        """按 ID 获取用户(不存在则抛错)."""
        user = self.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError(ErrorMessages.USER_NOT_FOUND, message_key="USER_NOT_FOUND", extra={"user_id": user_id})
        return user
