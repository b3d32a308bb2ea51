"""
Authentication endpoints.
"""

from typing import Any

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from authcore.api.deps import AccessPayload, Auth
from authcore.schemas.auth import AuthFailure, RefreshTokenRequest

router = APIRouter()


def _failure(result: AuthFailure) -> JSONResponse:
    content = {"detail": result.message, "code": result.code}
    if result.errors is not None:
        content["errors"] = result.errors
    return JSONResponse(status_code=result.status, content=content)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(auth: Auth, data: Any = Body(None)):
    """
    Register a new user account.

    Returns the user without its password hash.
    """
    result = await auth.register(data)
    if not result.success:
        return _failure(result)
    return result.user


@router.post("/login")
async def login(auth: Auth, data: Any = Body(None)):
    """Authenticate and return an access/refresh token pair."""
    result = await auth.login(data)
    if not result.success:
        return _failure(result)
    return {
        "access_token": result.access_token,
        "refresh_token": result.refresh_token,
        "token_type": "bearer",
        "expires_in": result.expires_in,
    }


@router.post("/refresh")
async def refresh(auth: Auth, data: RefreshTokenRequest):
    """Exchange a refresh token for a new access token."""
    result = await auth.refresh(data.refresh_token)
    if not result.success:
        return _failure(result)
    return {
        "access_token": result.access_token,
        "token_type": "bearer",
        "expires_in": result.expires_in,
    }


@router.get("/me")
async def me(payload: AccessPayload):
    """Claims of the presented access token."""
    return payload
