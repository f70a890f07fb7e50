"""用户服务 - Flask 应用初始化.

基于 Flask 的用户 CRUD JSON API,路由、校验与文档由 `app.api` 统一构建.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask, jsonify, request
from flask.typing import ResponseReturnValue
from flask_bcrypt import Bcrypt
from flask_cors import CORS

from app.api import register_api_blueprints
from app.constants import HttpHeaders, HttpMethod
from app.infra.logging.request_middleware import register_request_logging
from app.settings import Settings
from app.utils.response_utils import unified_error_response
from app.utils.structlog_config import (
    ErrorContext,
    configure_structlog,
    get_system_logger,
)

# 初始化扩展
bcrypt = Bcrypt()
cors = CORS()


def create_app(*, settings: Settings | None = None) -> Flask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        Flask: Flask应用实例

    Raises:
        ConfigurationError: 路由或 schema 声明冲突时抛出,应用不会启动.

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)

    # 配置应用
    configure_app(app, resolved_settings)

    # 初始化扩展
    initialize_extensions(app, resolved_settings)

    # 请求上下文与 wide event
    register_request_logging(app)

    # 注册蓝图
    configure_blueprints(app, resolved_settings)

    # 配置日志
    configure_logging(app)

    # 配置统一日志系统
    configure_structlog(app)

    # 设置全局日志级别
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger().setLevel(getattr(logging, log_level_name, logging.INFO))

    # 注册全局错误处理器
    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        payload, status_code = unified_error_response(error, context=ErrorContext(error, request))
        return jsonify(payload), status_code

    get_system_logger().info(
        "应用初始化完成",
        module="system",
        environment=resolved_settings.environment,
        api_docs_enabled=resolved_settings.api_docs_enabled,
    )
    return app


def configure_app(app: Flask, settings: Settings) -> None:
    """写入 Settings 提供的配置.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,包含环境变量解析、默认值与校验结果.

    """
    app.config.from_mapping(settings.to_flask_config())
    app.config.setdefault("APPLICATION_ROOT", "/")
    app.json.ensure_ascii = False
    app.json.sort_keys = False


def initialize_extensions(app: Flask, settings: Settings) -> None:
    """初始化密码加密与 CORS 扩展."""
    # 初始化密码加密
    bcrypt.init_app(app)

    # 初始化CORS
    cors.init_app(
        app,
        resources={
            r"/v1/*": {
                "origins": list(settings.cors_origins),
                "methods": [*HttpMethod.ALL, "OPTIONS"],
                "allow_headers": [HttpHeaders.CONTENT_TYPE, HttpHeaders.X_REQUEST_ID],
                "expose_headers": [HttpHeaders.X_REQUEST_ID],
            },
        },
    )


def configure_blueprints(app: Flask, settings: Settings) -> None:
    """注册 API 与文档蓝图."""
    register_api_blueprints(app, settings)


def configure_logging(app: Flask) -> None:
    """配置日志系统与文件处理器.

    调试与测试环境只输出到控制台.
    """
    if not app.debug and not app.testing:
        # 创建日志目录
        log_path = Path(app.config["LOG_FILE"])
        log_dir = log_path.parent
        log_dir.mkdir(parents=True, exist_ok=True)

        # 配置文件日志处理器
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=app.config["LOG_MAX_SIZE"],
            backupCount=app.config["LOG_BACKUP_COUNT"],
            encoding="utf-8",
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"),
        )
        file_handler.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.addHandler(file_handler)
        logging.getLogger().addHandler(file_handler)

        app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.info("用户服务启动")
