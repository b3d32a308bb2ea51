"""
User table for the SQL-backed store.
"""

import uuid
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Integer, String, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for authcore models."""

    type_annotation_map = {
        uuid.UUID: Uuid(),
    }


class User(Base):
    """User account. Fields outside the fixed columns live in ``extra``."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    # Bumping this invalidates every refresh token issued for the user
    refresh_token_version: Mapped[int] = mapped_column(
        Integer,
        default=1,
        nullable=False,
    )
    extra: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def to_record(self) -> Dict[str, Any]:
        """Flatten into the mapping shape AuthService works with."""
        return {
            **(self.extra or {}),
            "id": str(self.id),
            "email": self.email,
            "password_hash": self.password_hash,
            "refresh_token_version": self.refresh_token_version,
            "created_at": self.created_at,
        }

    def __repr__(self) -> str:
        return f"<User {self.email}>"
