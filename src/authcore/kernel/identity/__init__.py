"""
Identity Core - registration, login and token management.
"""

from authcore.kernel.identity.auth_service import AuthService, create_auth
from authcore.kernel.identity.errors import (
    AuthError,
    ConfigurationError,
    ConflictError,
    CredentialError,
    InputValidationError,
    NotFoundError,
    TokenError,
    TokenTypeError,
    UserAlreadyExistsError,
)
from authcore.kernel.identity.jwt import JWTManager, TokenCodec, parse_expiry
from authcore.kernel.identity.password import (
    CredentialHasher,
    PasswordHasher,
    hash_password,
    verify_password,
)
from authcore.kernel.identity.projection import strip_sensitive
from authcore.kernel.identity.store import (
    CallableUserStore,
    InMemoryUserStore,
    UserStore,
)
from authcore.kernel.identity.validation import ValidationOutcome, validate

__all__ = [
    # Service
    "AuthService",
    "create_auth",
    # Errors
    "AuthError",
    "ConfigurationError",
    "ConflictError",
    "CredentialError",
    "InputValidationError",
    "NotFoundError",
    "TokenError",
    "TokenTypeError",
    "UserAlreadyExistsError",
    # Tokens
    "JWTManager",
    "TokenCodec",
    "parse_expiry",
    # Passwords
    "CredentialHasher",
    "PasswordHasher",
    "hash_password",
    "verify_password",
    # Stores
    "CallableUserStore",
    "InMemoryUserStore",
    "UserStore",
    # Validation & projection
    "ValidationOutcome",
    "validate",
    "strip_sensitive",
]
