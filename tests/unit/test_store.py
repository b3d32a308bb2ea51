"""Unit tests for the in-process user stores."""

import pytest

from authcore.kernel.identity.errors import UserAlreadyExistsError
from authcore.kernel.identity.store import CallableUserStore, InMemoryUserStore


class TestInMemoryUserStore:
    """Tests for InMemoryUserStore."""

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, store: InMemoryUserStore):
        user = await store.create({"email": "a@x.com", "password_hash": "h", "name": "Ada"})

        assert user["id"]
        assert user["email"] == "a@x.com"
        assert user["name"] == "Ada"
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_create_ignores_caller_id(self, store: InMemoryUserStore):
        user = await store.create({"id": "chosen", "email": "a@x.com", "password_hash": "h"})

        assert user["id"] != "chosen"

    @pytest.mark.asyncio
    async def test_lookups(self, store: InMemoryUserStore):
        created = await store.create({"email": "a@x.com", "password_hash": "h"})

        assert await store.find_by_email("a@x.com") == created
        assert await store.find_by_id(created["id"]) == created
        assert await store.find_by_email("b@x.com") is None
        assert await store.find_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, store: InMemoryUserStore):
        await store.create({"email": "a@x.com", "password_hash": "h"})

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await store.create({"email": "a@x.com", "password_hash": "other"})

        assert exc_info.value.email == "a@x.com"
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, store: InMemoryUserStore):
        created = await store.create({"email": "a@x.com", "password_hash": "h"})
        created["email"] = "changed@x.com"

        found = await store.find_by_id(created["id"])
        found["password_hash"] = "changed"

        stored = await store.find_by_email("a@x.com")
        assert stored["password_hash"] == "h"

    @pytest.mark.asyncio
    async def test_increment_refresh_token_version(self, store: InMemoryUserStore):
        created = await store.create({"email": "a@x.com", "password_hash": "h"})

        assert await store.increment_refresh_token_version(created["id"]) == 2
        assert await store.increment_refresh_token_version(created["id"]) == 3
        assert (await store.find_by_id(created["id"]))["refresh_token_version"] == 3
        assert await store.increment_refresh_token_version("missing") is None


class TestCallableUserStore:
    """Tests for the function-based store adapter."""

    @pytest.mark.asyncio
    async def test_delegates_to_functions(self):
        calls = []

        async def find_by_email(email):
            calls.append(("email", email))
            return None

        async def find_by_id(user_id):
            calls.append(("id", user_id))
            return {"id": user_id}

        async def create(fields):
            calls.append(("create", dict(fields)))
            return {"id": "1", **fields}

        store = CallableUserStore(find_by_email, find_by_id, create)

        assert await store.find_by_email("a@x.com") is None
        assert await store.find_by_id("1") == {"id": "1"}
        assert await store.create({"email": "a@x.com"}) == {"id": "1", "email": "a@x.com"}
        assert calls == [
            ("email", "a@x.com"),
            ("id", "1"),
            ("create", {"email": "a@x.com"}),
        ]
