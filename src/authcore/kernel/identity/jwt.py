"""
JWT signing and verification.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional, Protocol, Union

from jose import JWTError, jwt
from pydantic_core import to_jsonable_python

Expiry = Union[str, int, timedelta]

_EXPIRY_PATTERN = re.compile(r"^(-?\d+(?:\.\d+)?)\s*(ms|s|m|h|d|w|y)?$", re.IGNORECASE)

_UNIT_SECONDS = {
    "ms": 0.001,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 60 * 60 * 24,
    "w": 60 * 60 * 24 * 7,
    "y": 60 * 60 * 24 * 365.25,
}


def parse_expiry(value: Expiry) -> timedelta:
    """
    Convert a token lifetime to a timedelta.

    Accepts seconds as an int, a timedelta, or a duration string such as
    ``"15m"``, ``"7d"`` or ``"3600"`` (bare numbers are seconds).

    Raises:
        ValueError: If the string is not a recognised duration
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid token expiry: {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    match = _EXPIRY_PATTERN.match(str(value).strip())
    if not match:
        raise ValueError(f"Invalid token expiry: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=float(amount) * _UNIT_SECONDS[(unit or "s").lower()])


class TokenCodec(Protocol):
    """Signs and verifies time-boxed tokens with an embedded payload."""

    def sign(self, payload: Mapping[str, Any], expires_in: Expiry) -> str:
        ...

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the payload, or None if the token does not verify."""
        ...


class JWTManager:
    """
    HMAC-signed JWTs via python-jose.

    Every token carries ``iat`` and ``exp`` claims next to the caller's
    payload; expiry is enforced at decode time.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def sign(self, payload: Mapping[str, Any], expires_in: Expiry) -> str:
        """
        Create a signed token.

        Args:
            payload: Claims to embed; converted to JSON-compatible values
            expires_in: Token lifetime

        Returns:
            Encoded JWT
        """
        now = datetime.now(timezone.utc)
        expire = now + parse_expiry(expires_in)

        claims = to_jsonable_python(dict(payload))
        claims["iat"] = int(now.timestamp())
        claims["exp"] = int(expire.timestamp())

        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode a token.

        Bad signatures, malformed input and expired tokens all yield None.
        """
        if not isinstance(token, str) or not token:
            return None
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
