"""
Logging for authcore.

Each auth call runs inside ``operation_context``; once the service knows
which account it is acting on it calls ``bind_user``. A handler filter
copies both onto every record, so call sites log plain messages:

    with operation_context("login"):
        bind_user(user["id"])
        logger.info("User logged in")

Credential-bearing extras (passwords, hashes, tokens) are masked before
formatting.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Iterator, Mapping, Optional

from pydantic_core import to_jsonable_python

if TYPE_CHECKING:
    from authcore.config import AuthSettings

CONTEXT_FIELDS = ("operation", "user_id")
REDACTED_FIELDS = frozenset({
    "password", "password_hash", "token", "access_token", "refresh_token", "secret",
})
REDACTED = "***"
UNSET = "-"

_auth_context: ContextVar[Mapping[str, str]] = ContextVar("auth_context", default={})

_STANDARD_ATTRS = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName",
)) | frozenset(CONTEXT_FIELDS)


def current_context() -> Dict[str, str]:
    """Operation and user bound to the running call, if any."""
    return dict(_auth_context.get())


def get_operation() -> Optional[str]:
    return _auth_context.get().get("operation")


@contextmanager
def operation_context(name: str) -> Iterator[None]:
    """
    Scope an auth operation.

    Starts from an empty context, so a user bound by an enclosing call
    does not leak into this one; both are restored on exit.
    """
    token = _auth_context.set({"operation": name})
    try:
        yield
    finally:
        _auth_context.reset(token)


def bind_user(user_id: Any) -> None:
    """Attach ``user_id`` to the current operation's records."""
    if user_id is None:
        return
    _auth_context.set({**_auth_context.get(), "user_id": str(user_id)})


class AuthContextFilter(logging.Filter):
    """Copy the auth context onto records and mask credential extras."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _auth_context.get()
        for field in CONTEXT_FIELDS:
            # An explicit extra= wins over the bound value
            if getattr(record, field, None) is None:
                setattr(record, field, context.get(field, UNSET))
        for key in REDACTED_FIELDS.intersection(record.__dict__):
            setattr(record, key, REDACTED)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for production log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value and value != UNSET:
                log_obj[field] = value

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and value is not None
        }
        log_obj.update(to_jsonable_python(extra, fallback=str))
        return json.dumps(log_obj)


def _create_dev_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] %(operation)s user=%(user_id)s %(message)s",
        datefmt="%H:%M:%S",
    )


def configure_logging(settings: "AuthSettings") -> None:
    """
    Install a single stderr handler on the root logger.

    JSON output when ``settings.environment`` is ``production``; DEBUG level
    whenever ``settings.debug`` is set.
    """
    if settings.debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(AuthContextFilter())
    if settings.environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(_create_dev_formatter())
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
