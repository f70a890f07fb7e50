"""API v1.

该包只承载对外 JSON API 的路由层与 OpenAPI 文档能力:
- 启动时构建 SchemaRegistry、Router 与 Pipeline,并在首个请求前冻结
- `/v1/<path>` 全部交给 Pipeline 分发
- `/v1/openapi.json` 导出由路由表生成的 OpenAPI 文档
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from flask import Blueprint, Response, jsonify, request
from werkzeug.exceptions import BadRequest

from app.api.openapi import ApiSurfaceComposer
from app.api.pipeline import Pipeline
from app.api.router import Router
from app.api.v1.users import UsersHandlers, register_user_routes
from app.constants import ContentTypes, HttpStatus
from app.constants.system_constants import ErrorMessages
from app.core.exceptions import ValidationError
from app.repositories.users_repository import UsersRepository
from app.schemas.registry import SchemaRegistry
from app.schemas.rules import ROOT_FIELD, FieldViolation, Target, ViolationRule
from app.schemas.users import register_user_schemas
from app.services.users import UserReadService, UserWriteService

if TYPE_CHECKING:
    from flask.blueprints import BlueprintSetupState
    from flask.typing import ResponseReturnValue

    from app.settings import Settings
    from app.types.structures import JsonValue

API_V1_PREFIX = "/v1"
API_V1_EXTENSION_KEY = "api_v1"

DISPATCH_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]


@dataclass(frozen=True, slots=True)
class ApiV1:
    """v1 路由层的启动期产物,请求期间只读."""

    registry: SchemaRegistry
    router: Router
    pipeline: Pipeline
    composer: ApiSurfaceComposer
    repository: UsersRepository


def build_api_v1(settings: Settings, *, repository: UsersRepository | None = None) -> ApiV1:
    """构建并冻结 v1 的 schema 注册表、路由表与分发流水线.

    Raises:
        ConfigurationError: 路由或 schema 声明冲突/非法.

    """
    registry = SchemaRegistry()
    register_user_schemas(registry)

    router = Router()
    register_user_routes(router)

    store = repository or UsersRepository()
    handlers = UsersHandlers(UserReadService(store), UserWriteService(store))
    pipeline = Pipeline(router, registry, handlers.as_mapping())
    composer = ApiSurfaceComposer.from_settings(router, registry, settings, base_path=API_V1_PREFIX)
    return ApiV1(registry=registry, router=router, pipeline=pipeline, composer=composer, repository=store)


def _invalid_json_error(exc: Exception) -> ValidationError:
    violation = FieldViolation(Target.BODY, ROOT_FIELD, ViolationRule.TYPE, ErrorMessages.INVALID_JSON)
    return ValidationError(
        ErrorMessages.INVALID_JSON,
        violations=(violation,),
        message_key="INVALID_JSON",
        extra={"exception": str(exc)},
    )


def parse_request_body() -> JsonValue:
    """按 Content-Type 解析请求体.

    - JSON: 解析失败抛出 ValidationError
    - 表单: 转为扁平字典
    - 其他或空请求体: None
    """
    if request.is_json:
        if not request.get_data(cache=True):
            return None
        try:
            return request.get_json()
        except BadRequest as exc:
            raise _invalid_json_error(exc) from exc
    if request.mimetype == ContentTypes.FORM_URLENCODED:
        return request.form.to_dict()
    return None


def create_api_v1_blueprint(settings: Settings, *, api: ApiV1 | None = None) -> Blueprint:
    """创建并配置 `/v1` Blueprint."""
    api_v1 = api or build_api_v1(settings)
    blueprint = Blueprint("api_v1", __name__)

    @blueprint.record_once
    def _attach(state: BlueprintSetupState) -> None:
        state.app.extensions[API_V1_EXTENSION_KEY] = api_v1

    @blueprint.get("/openapi.json")
    def openapi_json() -> tuple[Response, int]:
        return jsonify(api_v1.composer.describe()), HttpStatus.OK

    @blueprint.route("/", defaults={"subpath": ""}, methods=DISPATCH_METHODS)
    @blueprint.route("/<path:subpath>", methods=DISPATCH_METHODS)
    def dispatch(subpath: str) -> ResponseReturnValue:
        return api_v1.pipeline.dispatch(
            request.method,
            f"/{subpath}",
            query=request.args.to_dict(),
            body_loader=parse_request_body,
            headers=dict(request.headers),
        )

    return blueprint


__all__ = [
    "API_V1_EXTENSION_KEY",
    "API_V1_PREFIX",
    "ApiV1",
    "build_api_v1",
    "create_api_v1_blueprint",
    "parse_request_body",
]
