# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供环境隔离与通用请求构造 fixtures。
"""

import pytest

from app.types.requests import ApiRequest


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - 避免开发者本机环境变量影响测试稳定性
    - bcrypt 使用最低轮数,加快测试
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("BCRYPT_LOG_ROUNDS", "4")
    monkeypatch.delenv("API_DOCS_ENABLED", raising=False)
    monkeypatch.delenv("FLASK_DEBUG", raising=False)
    monkeypatch.delenv("CORS_ORIGINS", raising=False)


@pytest.fixture
def make_request():
    """构造 ApiRequest 的便捷工厂."""

    def _make(**overrides) -> ApiRequest:
        fields = {"method": "POST", "path": "/users"}
        fields.update(overrides)
        return ApiRequest(**fields)

    return _make
