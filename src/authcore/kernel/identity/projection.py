"""
Safe user projection.

The only place sensitive fields are removed from user records. Applied to
every outward path: register result and the payload of each access token.
"""

from typing import Any, Dict, Mapping

from pydantic import BaseModel

SENSITIVE_FIELDS = frozenset({"password_hash", "password"})


def as_dict(user: Any) -> Dict[str, Any]:
    """Copy a user record (mapping or pydantic model) into a plain dict."""
    if isinstance(user, BaseModel):
        return user.model_dump()
    if isinstance(user, Mapping):
        return dict(user)
    raise TypeError(f"Unsupported user record type: {type(user).__name__}")


def strip_sensitive(user: Any) -> Dict[str, Any]:
    """
    Return a copy of ``user`` without password or hash fields.

    Idempotent; the input is never modified.
    """
    return {
        key: value
        for key, value in as_dict(user).items()
        if key not in SENSITIVE_FIELDS
    }


def refresh_token_version(user: Any) -> int:
    """Current refresh token version of a user; absent means 1."""
    version = as_dict(user).get("refresh_token_version")
    return 1 if version is None else version
