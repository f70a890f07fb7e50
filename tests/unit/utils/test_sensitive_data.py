import pytest

from app.utils.sensitive_data import scrub_sensitive_fields
from app.utils.structlog_config import StructlogConfig


@pytest.mark.unit
def test_password_fields_are_masked_recursively() -> None:
    payload = {"name": "Ann", "password": "s3cret", "profile": {"password_hash": "x", "city": "Paris"}}

    scrubbed = scrub_sensitive_fields(payload)

    assert scrubbed == {"name": "Ann", "password": "***", "profile": {"password_hash": "***", "city": "Paris"}}
    assert payload["password"] == "s3cret"


@pytest.mark.unit
def test_extra_keys_and_non_mapping_payloads() -> None:
    assert scrub_sensitive_fields({"Email": "a@b.c"}, extra_keys=["email"]) == {"Email": "***"}
    assert scrub_sensitive_fields(["password"]) == {}
    assert scrub_sensitive_fields(None) == {}


@pytest.mark.unit
def test_log_events_are_scrubbed_before_rendering() -> None:
    event = {"event": "user_created", "body": {"name": "Ann", "password": "s3cret"}}

    rendered = StructlogConfig._scrub_sensitive(None, "info", event)

    assert rendered == {"event": "user_created", "body": {"name": "Ann", "password": "***"}}
