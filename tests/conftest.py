"""
Pytest fixtures for authcore tests.
"""

import pytest
import pytest_asyncio

from authcore.config import AuthSettings
from authcore.kernel.identity.auth_service import AuthService
from authcore.kernel.identity.jwt import JWTManager
from authcore.kernel.identity.password import PasswordHasher
from authcore.kernel.identity.store import InMemoryUserStore

TEST_SECRET = "test-secret-key-for-testing-only"


@pytest.fixture
def settings() -> AuthSettings:
    """Settings isolated from the environment and any .env file."""
    return AuthSettings(
        _env_file=None,
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    """bcrypt at the minimum work factor to keep tests fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_manager() -> JWTManager:
    return JWTManager(TEST_SECRET)


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def auth(store: InMemoryUserStore, hasher: PasswordHasher, settings: AuthSettings) -> AuthService:
    return AuthService(store, secret=TEST_SECRET, hasher=hasher, settings=settings)


@pytest_asyncio.fixture
async def registered_user(auth: AuthService) -> dict:
    """A user registered through the service; password is ``secret1``."""
    result = await auth.register({
        "email": "a@x.com",
        "password": "secret1",
        "name": "Ada",
        "role": "user",
    })
    assert result.success, result
    return result.user
