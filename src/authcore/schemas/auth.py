"""
Authentication schemas: validated inputs and operation results.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic_core import PydanticCustomError

# Names an extra registration field may not take: registered JWT claims,
# the token type tag, and fields owned by the store or the service
RESERVED_FIELDS = frozenset({
    "exp", "iat", "nbf", "aud", "iss", "sub", "jti",
    "type",
    "id", "password_hash", "refresh_token_version",
})


class RegisterInput(BaseModel):
    """
    Registration request.

    Extra fields pass through unvalidated, except names in
    ``RESERVED_FIELDS``.
    """

    model_config = ConfigDict(extra="allow")

    email: EmailStr
    password: str = Field(..., min_length=6)

    @model_validator(mode="after")
    def reject_reserved_fields(self) -> "RegisterInput":
        reserved = sorted(RESERVED_FIELDS.intersection(self.model_extra or {}))
        if reserved:
            raise PydanticCustomError(
                "reserved_field",
                "Field name is reserved: {fields}",
                {"fields": ", ".join(reserved)},
            )
        return self

    @property
    def extra_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class LoginInput(BaseModel):
    """Login request."""

    model_config = ConfigDict(extra="allow")

    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthFailure(BaseModel):
    """Failed operation."""

    success: Literal[False] = False
    status: int
    message: str
    code: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None


class RegisterSuccess(BaseModel):
    """Successful registration; ``user`` is the safe projection."""

    success: Literal[True] = True
    status: int = 201
    user: Dict[str, Any]


class LoginSuccess(BaseModel):
    """Successful login."""

    success: Literal[True] = True
    status: int = 200
    access_token: str
    refresh_token: str
    expires_in: str


class VerifySuccess(BaseModel):
    """Successful token verification."""

    success: Literal[True] = True
    status: int = 200
    payload: Dict[str, Any]


class RefreshSuccess(BaseModel):
    """Successful refresh. No new refresh token is issued."""

    success: Literal[True] = True
    status: int = 200
    access_token: str
    expires_in: str


class RefreshTokenRequest(BaseModel):
    """Token refresh request body."""

    refresh_token: str
