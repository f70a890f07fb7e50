"""用户服务 JSON API 入口.

- `/v1/**` 由自有路由表 + 校验流水线分发
- `/v1/openapi.json` 导出路由表生成的 OpenAPI 文档
- `/swagger` 提供文档浏览页面(可配置关闭)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flask import Flask

    from app.settings import Settings


def register_api_blueprints(app: Flask, settings: Settings) -> None:
    """按 Settings 注册 API blueprints.

    路由表与 schema 在此处一次性构建并冻结,声明冲突会以 ConfigurationError 终止启动.
    """
    from app.api.docs import create_docs_blueprint  # noqa: PLC0415
    from app.api.v1 import create_api_v1_blueprint  # noqa: PLC0415

    api_v1_bp = create_api_v1_blueprint(settings)
    app.register_blueprint(api_v1_bp, url_prefix="/v1")

    if settings.api_docs_enabled:
        app.register_blueprint(create_docs_blueprint(settings))
