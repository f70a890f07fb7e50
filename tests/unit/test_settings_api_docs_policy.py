import pytest

from app.settings import DEFAULT_API_TITLE, Settings


@pytest.mark.unit
def test_settings_defaults_describe_users_api(monkeypatch) -> None:
    monkeypatch.delenv("API_TITLE", raising=False)

    settings = Settings.load()

    assert settings.api_title == DEFAULT_API_TITLE
    assert settings.api_docs_enabled is True
    assert settings.is_testing is True
    assert settings.to_flask_config()["TESTING"] is True
    assert settings.to_flask_config()["BCRYPT_HANDLE_LONG_PASSWORDS"] is True


@pytest.mark.unit
def test_settings_fails_fast_when_secret_key_missing_in_production(monkeypatch) -> None:
    monkeypatch.setenv("FLASK_ENV", "production")
    monkeypatch.setenv("SECRET_KEY", "")

    with pytest.raises(ValueError, match=r"SECRET_KEY.*production"):
        Settings.load()


@pytest.mark.unit
def test_api_docs_default_off_in_production(monkeypatch) -> None:
    monkeypatch.setenv("FLASK_ENV", "production")

    assert Settings.load().api_docs_enabled is False

    monkeypatch.setenv("API_DOCS_ENABLED", "true")
    assert Settings.load().api_docs_enabled is True


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("http://a.test, http://b.test", ("http://a.test", "http://b.test")),
        ('["http://a.test"]', ("http://a.test",)),
    ],
)
def test_cors_origins_accept_csv_or_json(monkeypatch, raw, expected) -> None:
    monkeypatch.setenv("CORS_ORIGINS", raw)

    assert Settings.load().cors_origins == expected


@pytest.mark.unit
def test_invalid_values_are_reported_together(monkeypatch) -> None:
    monkeypatch.setenv("BCRYPT_LOG_ROUNDS", "2")
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    with pytest.raises(ValueError, match="配置校验失败") as exc_info:
        Settings.load()

    assert "BCRYPT_LOG_ROUNDS" in str(exc_info.value)
    assert "LOG_LEVEL" in str(exc_info.value)
