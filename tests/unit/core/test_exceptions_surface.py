"""异常与响应工具的对外接口约束."""

import builtins

import pytest

from app.core import exceptions
from app.utils import response_utils


@pytest.mark.unit
def test_exception_module_exports_only_raised_types() -> None:
    assert sorted(exceptions.__all__) == [
        "AppError",
        "ConfigurationError",
        "ConflictError",
        "NotFoundError",
        "RouteNotFoundError",
        "ValidationError",
    ]
    for name in exceptions.__all__:
        assert issubclass(getattr(exceptions, name), exceptions.AppError)
        assert not hasattr(builtins, name)


@pytest.mark.unit
def test_error_responses_are_rendered_by_the_global_handler_only() -> None:
    assert not hasattr(response_utils, "jsonify_unified_error")
    assert hasattr(response_utils, "jsonify_unified_success")
