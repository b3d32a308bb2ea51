"""
FastAPI dependencies for the auth service and bearer authentication.
"""

from typing import Annotated, Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from authcore.kernel.identity.auth_service import ACCESS_TOKEN_TYPE, AuthService

# Security scheme
security = HTTPBearer(auto_error=False)


def get_auth(request: Request) -> AuthService:
    """The AuthService attached to the application."""
    return request.app.state.auth


Auth = Annotated[AuthService, Depends(get_auth)]


def get_access_payload(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    auth: Auth,
) -> Dict[str, Any]:
    """Verified access token payload or raise 401."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = auth.verify(credentials.credentials)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    # verify() accepts refresh tokens too
    if result.payload.get("type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return result.payload


AccessPayload = Annotated[Dict[str, Any], Depends(get_access_payload)]
