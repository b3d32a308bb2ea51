"""
Authentication configuration using pydantic-settings.
Loads from environment variables (prefix ``AUTHCORE_``) with .env file support.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTHCORE_",
        case_sensitive=False,
    )

    # Tokens
    secret_key: Optional[str] = None
    algorithm: str = "HS256"
    access_token_expiry: str = "15m"
    refresh_token_expiry: str = "7d"

    # Password hashing
    bcrypt_rounds: int = 12

    # Reference SQL store
    database_url: str = "sqlite+aiosqlite:///./authcore.db"

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    project_name: str = "authcore"
    version: str = "0.1.0"


@lru_cache
def get_settings() -> AuthSettings:
    """Get cached settings instance."""
    return AuthSettings()
