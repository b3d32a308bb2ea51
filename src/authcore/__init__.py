"""
authcore - email/password authentication core with versioned refresh tokens.
"""

from authcore.kernel.identity import (
    AuthService,
    InMemoryUserStore,
    UserStore,
    create_auth,
    strip_sensitive,
)

__version__ = "0.1.0"

__all__ = [
    "AuthService",
    "InMemoryUserStore",
    "UserStore",
    "create_auth",
    "strip_sensitive",
]
