"""HTTP头常量.

定义常用的HTTP头名称，避免魔法字符串。
"""


class HttpHeaders:
    """HTTP头常量."""

    CONTENT_TYPE = "Content-Type"
    ACCEPT = "Accept"
    USER_AGENT = "User-Agent"
    LOCATION = "Location"

    # 自定义HTTP头（X-前缀）
    X_REQUEST_ID = "X-Request-ID"


class ContentTypes:
    """请求体协商支持的 Content-Type."""

    JSON = "application/json"
    FORM_URLENCODED = "application/x-www-form-urlencoded"
