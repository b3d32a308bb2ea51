"""
Error taxonomy for authentication operations.

``AuthError`` subclasses are raised inside AuthService steps and turned into
``AuthFailure`` results before leaving the service. Collaborator failures
(store, hasher, token codec) are not part of this hierarchy and propagate.
"""

from typing import Dict, List, Optional

from authcore.schemas.auth import AuthFailure


class AuthError(Exception):
    """Base class for user-facing authentication failures."""

    status: int = 400
    code: str = "auth_error"
    default_message: str = "Authentication error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_result(self) -> AuthFailure:
        return AuthFailure(status=self.status, message=self.message, code=self.code)


class InputValidationError(AuthError):
    """Malformed or missing input fields."""

    status = 400
    code = "validation_error"
    default_message = "Validation error"

    def __init__(
        self,
        errors: Dict[str, List[str]],
        message: Optional[str] = None,
    ):
        super().__init__(message)
        self.errors = errors

    def to_result(self) -> AuthFailure:
        return AuthFailure(
            status=self.status,
            message=self.message,
            code=self.code,
            errors=self.errors,
        )


class ConflictError(AuthError):
    """Email already registered."""

    status = 400
    code = "conflict"
    default_message = "User already exists"


class NotFoundError(AuthError):
    """Login against an unknown email."""

    status = 404
    code = "not_found"
    default_message = "User not found"


class CredentialError(AuthError):
    """Wrong password."""

    status = 401
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class TokenError(AuthError):
    """Missing, malformed, expired or invalidated token."""

    status = 401
    code = "invalid_token"
    default_message = "Invalid or expired token"


class TokenTypeError(AuthError):
    """Token of the wrong type for the operation."""

    status = 400
    code = "invalid_token_type"
    default_message = "Invalid token type"


class UserAlreadyExistsError(Exception):
    """
    Raised by a UserStore's ``create`` when the email is already taken.

    Stores must enforce email uniqueness themselves (unique index, lock,
    transaction); the service's pre-check alone is racy.
    """

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User with email {email!r} already exists")


class ConfigurationError(ValueError):
    """Invalid AuthService configuration."""
