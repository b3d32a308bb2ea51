"""
Pydantic schemas for authcore inputs and results.
"""

from authcore.schemas.auth import (
    AuthFailure,
    LoginInput,
    LoginSuccess,
    RefreshSuccess,
    RefreshTokenRequest,
    RegisterInput,
    RegisterSuccess,
    VerifySuccess,
)

__all__ = [
    "AuthFailure",
    "LoginInput",
    "LoginSuccess",
    "RefreshSuccess",
    "RefreshTokenRequest",
    "RegisterInput",
    "RegisterSuccess",
    "VerifySuccess",
]
