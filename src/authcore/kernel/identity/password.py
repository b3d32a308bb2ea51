"""
Password hashing using bcrypt.
"""

from typing import Protocol

import bcrypt

# Work factor for new hashes (12 is a secure default)
BCRYPT_ROUNDS = 12

# bcrypt only uses the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class CredentialHasher(Protocol):
    """One-way hash and compare for passwords."""

    def hash(self, password: str) -> str:
        """Hash plaintext password for storage."""
        ...

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Compare plaintext password against a stored hash."""
        ...


class PasswordHasher:
    """bcrypt implementation of ``CredentialHasher``."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string (``$2b$...``)
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(password), salt).decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        A malformed stored hash counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(
                self._encode(plain_password),
                hashed_password.encode("utf-8"),
            )
        except (ValueError, TypeError, AttributeError):
            return False


_default_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password."""
    return _default_hasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return _default_hasher.verify(plain_password, hashed_password)
