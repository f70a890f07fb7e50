"""数据模型模块.

主要模型:
- User: 用户模型
"""

__all__ = ["User"]

from .user import User
