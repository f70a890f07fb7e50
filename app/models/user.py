"""用户服务 - 用户模型."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from app import bcrypt


def generate_user_id() -> str:
    return uuid4().hex


@dataclass(slots=True)
class User:
    """用户模型.

    Attributes:
        id: 用户 ID,生成的字符串.
        name: 用户名称.
        email: 登录邮箱,唯一.
        password_hash: bcrypt 加密后的密码,不会出现在 to_dict 中.
        created_at: 创建时间.
        updated_at: 最后修改时间.

    """

    name: str
    email: str
    password_hash: str = ""
    id: str = field(default_factory=generate_user_id)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def set_password(self, password: str) -> None:
        """设置密码(加密)."""
        self.password_hash = bcrypt.generate_password_hash(password).decode("utf-8")

    def check_password(self, password: str) -> bool:
        """验证密码.

        Args:
            password: 原始密码

        Returns:
            bool: 密码是否正确

        """
        if not self.password_hash:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    def touch(self) -> None:
        self.updated_at = datetime.now(UTC)

    def to_dict(self) -> dict[str, str]:
        """转换为对外输出的字典,不包含密码."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def __repr__(self) -> str:
        return f"<User {self.email}>"
