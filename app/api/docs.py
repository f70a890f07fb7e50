"""API 文档浏览页面.

`/swagger` 渲染 Swagger UI,文档内容来自 `/v1/openapi.json`,页面本身不生成任何文档数据.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Blueprint, render_template_string, url_for

if TYPE_CHECKING:
    from app.settings import Settings

SWAGGER_UI_VERSION = "5"

SWAGGER_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="zh-CN">
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
  <link rel="stylesheet" href="https://unpkg.com/swagger-ui-dist@{{ ui_version }}/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@{{ ui_version }}/swagger-ui-bundle.js"></script>
  <script>
    window.onload = function () {
      window.ui = SwaggerUIBundle({ url: {{ openapi_url | tojson }}, dom_id: "#swagger-ui" });
    };
  </script>
</body>
</html>
"""


def create_docs_blueprint(settings: Settings) -> Blueprint:
    """创建 `/swagger` 文档页面 Blueprint."""
    blueprint = Blueprint("api_docs", __name__)

    @blueprint.get("/swagger")
    def swagger_ui() -> str:
        return render_template_string(
            SWAGGER_PAGE_TEMPLATE,
            title=settings.api_title,
            ui_version=SWAGGER_UI_VERSION,
            openapi_url=url_for("api_v1.openapi_json"),
        )

    return blueprint


__all__ = ["create_docs_blueprint"]
