"""
UserStore backed by SQLAlchemy async sessions.
"""

import uuid
from typing import Any, Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from authcore.kernel.identity.errors import UserAlreadyExistsError
from authcore.kernel.identity.store import UserRecord
from authcore.kernel.models.user import User
from authcore.logging_config import get_logger

logger = get_logger(__name__)

_COLUMNS = frozenset({"id", "email", "password_hash", "refresh_token_version"})


def _parse_id(user_id: Any) -> Optional[uuid.UUID]:
    if isinstance(user_id, uuid.UUID):
        return user_id
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


class SqlAlchemyUserStore:
    """
    Relational user store.

    Each call runs in its own session. Email uniqueness is enforced by the
    unique index on ``users.email``.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        async with self.session_maker() as session:
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
            return user.to_record() if user else None

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        parsed = _parse_id(user_id)
        if parsed is None:
            return None
        async with self.session_maker() as session:
            user = await session.get(User, parsed)
            return user.to_record() if user else None

    async def create(self, fields: Mapping[str, Any]) -> UserRecord:
        user = User(
            email=fields["email"],
            password_hash=fields["password_hash"],
            refresh_token_version=fields.get("refresh_token_version") or 1,
            extra={k: v for k, v in fields.items() if k not in _COLUMNS},
        )
        async with self.session_maker() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise UserAlreadyExistsError(fields["email"]) from exc
            await session.refresh(user)
            logger.debug("Inserted user row", extra={"user_id": str(user.id)})
            return user.to_record()

    async def increment_refresh_token_version(self, user_id: str) -> Optional[int]:
        """
        Invalidate every outstanding refresh token of a user.

        Returns:
            The new version, or None if the user does not exist
        """
        parsed = _parse_id(user_id)
        if parsed is None:
            return None
        async with self.session_maker() as session:
            result = await session.execute(
                update(User)
                .where(User.id == parsed)
                .values(refresh_token_version=User.refresh_token_version + 1)
            )
            if result.rowcount == 0:
                await session.rollback()
                return None
            await session.commit()
            user = await session.get(User, parsed, populate_existing=True)
            return user.refresh_token_version if user else None
