"""HTTP方法常量.

定义路由层支持的HTTP请求方法,避免魔法字符串.
"""

from typing import ClassVar


class HttpMethod:
    """HTTP方法常量.

    路由表只接受 GET/POST/PUT/DELETE 四种方法.
    """

    GET: ClassVar[str] = "GET"           # 获取资源
    POST: ClassVar[str] = "POST"         # 创建资源
    PUT: ClassVar[str] = "PUT"           # 更新资源
    DELETE: ClassVar[str] = "DELETE"     # 删除资源

    ALL: ClassVar[tuple[str, ...]] = (GET, POST, PUT, DELETE)

    WRITE_METHODS: ClassVar[tuple[str, ...]] = (POST, PUT, DELETE)

    @classmethod
    def normalize(cls, method: str) -> str:
        """统一为大写形式.

        Args:
            method: HTTP方法字符串

        Returns:
            str: 去除空白后的大写方法名

        """
        return (method or "").strip().upper()

    @classmethod
    def is_valid(cls, method: str) -> bool:
        """判断HTTP方法是否受路由表支持.

        Args:
            method: HTTP方法字符串

        Returns:
            bool: 是否为有效方法

        """
        return cls.normalize(method) in cls.ALL

    @classmethod
    def is_write(cls, method: str) -> bool:
        """判断HTTP方法是否为写入方法.

        Args:
            method: HTTP方法字符串

        Returns:
            bool: 是否为写入方法

        """
        return cls.normalize(method) in cls.WRITE_METHODS
