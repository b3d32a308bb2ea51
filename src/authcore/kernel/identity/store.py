"""
User store contract and the in-process implementations.

A store is any object with three coroutines: ``find_by_email``,
``find_by_id`` and ``create``. Users are plain mappings shaped like
``{id, email, password_hash, refresh_token_version?, ...extra}``.
"""

import asyncio
import copy
import uuid
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol

from authcore.kernel.identity.errors import UserAlreadyExistsError

UserRecord = Dict[str, Any]


class UserStore(Protocol):
    """Persistence capabilities consumed by AuthService."""

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        ...

    async def create(self, fields: Mapping[str, Any]) -> UserRecord:
        """
        Persist a new user and return it with ``id`` assigned.

        Must raise UserAlreadyExistsError if the email is taken.
        """
        ...


class CallableUserStore:
    """Adapt three caller-supplied coroutine functions to ``UserStore``."""

    def __init__(
        self,
        find_by_email: Callable[[str], Awaitable[Optional[UserRecord]]],
        find_by_id: Callable[[str], Awaitable[Optional[UserRecord]]],
        create: Callable[[Mapping[str, Any]], Awaitable[UserRecord]],
    ):
        self._find_by_email = find_by_email
        self._find_by_id = find_by_id
        self._create = create

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        return await self._find_by_email(email)

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        return await self._find_by_id(user_id)

    async def create(self, fields: Mapping[str, Any]) -> UserRecord:
        return await self._create(fields)


class InMemoryUserStore:
    """
    Dict-backed store for tests and local development.

    Records are copied in and out, so callers cannot mutate stored state.
    """

    def __init__(self):
        self._users: Dict[str, UserRecord] = {}
        self._ids_by_email: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._users)

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        user_id = self._ids_by_email.get(email)
        if user_id is None:
            return None
        return copy.deepcopy(self._users[user_id])

    async def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        user = self._users.get(str(user_id))
        return copy.deepcopy(user) if user is not None else None

    async def create(self, fields: Mapping[str, Any]) -> UserRecord:
        async with self._lock:
            email = fields["email"]
            if email in self._ids_by_email:
                raise UserAlreadyExistsError(email)

            user_id = str(uuid.uuid4())
            user = {"id": user_id, **copy.deepcopy(dict(fields))}
            user["id"] = user_id
            self._users[user_id] = user
            self._ids_by_email[email] = user_id
            return copy.deepcopy(user)

    async def increment_refresh_token_version(self, user_id: str) -> Optional[int]:
        """
        Invalidate every outstanding refresh token of a user.

        Returns:
            The new version, or None if the user does not exist
        """
        async with self._lock:
            user = self._users.get(str(user_id))
            if user is None:
                return None
            current = user.get("refresh_token_version")
            user["refresh_token_version"] = (1 if current is None else current) + 1
            return user["refresh_token_version"]
