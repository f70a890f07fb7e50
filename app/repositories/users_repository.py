"""用户 Repository.

职责:
- 负责用户数据的读取与写入(进程内存储)
- 不做校验、不做序列化、不返回 Response
- 数据仅在进程生命周期内有效,不提供持久化保证
"""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager

from app.models.user import User


class UsersRepository:
    """用户存储 Repository.

    以 id 为键保存用户,读写都在同一把可重入锁内完成;
    "检查后写入"的组合操作需在 transaction() 内进行.
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.RLock()

    def transaction(self) -> AbstractContextManager[bool]:
        return self._lock

    def get_by_id(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        normalized = (email or "").strip().lower()
        if not normalized:
            return None
        with self._lock:
            for user in self._users.values():
                if user.email.lower() == normalized:
                    return user
        return None

    def list_users(self) -> list[User]:
        with self._lock:
            return sorted(self._users.values(), key=lambda user: user.created_at)

    def add(self, user: User) -> User:
        with self._lock:
            self._users[user.id] = user
        return user

    def delete(self, user: User) -> None:
        with self._lock:
            self._users.pop(user.id, None)

    def count_users(self) -> int:
        with self._lock:
            return len(self._users)
