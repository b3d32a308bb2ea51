"""Unit tests for logging configuration."""

import json
import logging

from authcore.config import AuthSettings
from authcore.logging_config import (
    AuthContextFilter,
    JsonFormatter,
    bind_user,
    configure_logging,
    current_context,
    get_operation,
    operation_context,
)


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("authcore.test", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_operation_context_resets():
    assert get_operation() is None
    with operation_context("login"):
        assert get_operation() == "login"
        with operation_context("refresh"):
            assert get_operation() == "refresh"
        assert get_operation() == "login"
    assert get_operation() is None


def test_bound_user_is_scoped_to_operation():
    with operation_context("login"):
        bind_user(42)
        assert current_context() == {"operation": "login", "user_id": "42"}
        with operation_context("refresh"):
            assert "user_id" not in current_context()
        assert current_context()["user_id"] == "42"
    assert current_context() == {}


def test_bind_user_ignores_none():
    with operation_context("refresh"):
        bind_user(None)
        assert current_context() == {"operation": "refresh"}


def test_json_formatter_includes_bound_context():
    record = _record("User logged in")
    with operation_context("login"):
        bind_user("u1")
        AuthContextFilter().filter(record)

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "User logged in"
    assert data["level"] == "INFO"
    assert data["operation"] == "login"
    assert data["user_id"] == "u1"


def test_explicit_user_id_extra_wins():
    record = _record("Inserted user row", user_id="explicit")
    with operation_context("register"):
        bind_user("bound")
        AuthContextFilter().filter(record)

    assert record.user_id == "explicit"


def test_filter_masks_credential_extras():
    record = _record("x", password="secret1", refresh_token="eyJ.abc.def", role="admin")
    AuthContextFilter().filter(record)

    data = json.loads(JsonFormatter().format(record))

    assert data["password"] == "***"
    assert data["refresh_token"] == "***"
    assert data["role"] == "admin"


def test_json_formatter_omits_unset_context_and_stringifies_extra():
    record = _record("x", marker=object())
    AuthContextFilter().filter(record)

    data = json.loads(JsonFormatter().format(record))

    assert "operation" not in data
    assert "user_id" not in data
    assert data["marker"].startswith("<object object")


def test_configure_logging_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    settings = AuthSettings(_env_file=None, environment="production", log_level="warning")
    try:
        configure_logging(settings)
        configure_logging(settings)

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
