# tests/unit/api/conftest.py
"""API 契约测试专用 fixtures.

提供 app 与 test_client。
"""

import pytest

from app import create_app
from app.settings import Settings


@pytest.fixture(scope="function")
def app():
    """创建测试应用实例."""
    settings = Settings.load()
    app = create_app(settings=settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture(scope="function")
def client(app):
    """创建测试客户端."""
    return app.test_client()
