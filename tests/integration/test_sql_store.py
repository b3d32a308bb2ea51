"""Integration tests for SqlAlchemyUserStore on a temp-file SQLite database."""

import uuid

import pytest
import pytest_asyncio

from authcore.database import create_engine, create_session_maker, init_models
from authcore.kernel.identity.auth_service import AuthService
from authcore.kernel.identity.errors import UserAlreadyExistsError
from authcore.kernel.identity.password import PasswordHasher
from authcore.kernel.identity.sql_store import SqlAlchemyUserStore


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """Store on a file DB so all connections share the same database."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    await init_models(engine)
    yield SqlAlchemyUserStore(create_session_maker(engine))
    await engine.dispose()


@pytest.mark.asyncio
async def test_create_and_find(sql_store: SqlAlchemyUserStore):
    created = await sql_store.create({
        "email": "a@x.com",
        "password_hash": "h",
        "name": "Ada",
    })

    assert uuid.UUID(created["id"])
    assert created["email"] == "a@x.com"
    assert created["name"] == "Ada"
    assert created["refresh_token_version"] == 1

    by_email = await sql_store.find_by_email("a@x.com")
    by_id = await sql_store.find_by_id(created["id"])
    assert by_email["id"] == created["id"]
    assert by_id["email"] == "a@x.com"
    assert by_id["name"] == "Ada"


@pytest.mark.asyncio
async def test_missing_users(sql_store: SqlAlchemyUserStore):
    assert await sql_store.find_by_email("nobody@x.com") is None
    assert await sql_store.find_by_id(str(uuid.uuid4())) is None
    assert await sql_store.find_by_id("not-a-uuid") is None


@pytest.mark.asyncio
async def test_unique_email(sql_store: SqlAlchemyUserStore):
    await sql_store.create({"email": "a@x.com", "password_hash": "h"})

    with pytest.raises(UserAlreadyExistsError):
        await sql_store.create({"email": "a@x.com", "password_hash": "h2"})


@pytest.mark.asyncio
async def test_increment_refresh_token_version(sql_store: SqlAlchemyUserStore):
    created = await sql_store.create({"email": "a@x.com", "password_hash": "h"})

    assert await sql_store.increment_refresh_token_version(created["id"]) == 2
    assert (await sql_store.find_by_id(created["id"]))["refresh_token_version"] == 2
    assert await sql_store.increment_refresh_token_version(str(uuid.uuid4())) is None


@pytest.mark.asyncio
async def test_auth_flow_on_sql_store(sql_store: SqlAlchemyUserStore):
    auth = AuthService(sql_store, secret="sql-test-secret", hasher=PasswordHasher(rounds=4))

    registered = await auth.register({"email": "a@x.com", "password": "secret1", "name": "Ada"})
    assert registered.status == 201
    assert "password_hash" not in registered.user

    tokens = await auth.login({"email": "a@x.com", "password": "secret1"})
    assert tokens.success is True

    payload = auth.verify(tokens.access_token).payload
    assert payload["id"] == registered.user["id"]
    assert payload["name"] == "Ada"

    assert (await auth.refresh(tokens.refresh_token)).success is True

    await sql_store.increment_refresh_token_version(registered.user["id"])
    revoked = await auth.refresh(tokens.refresh_token)
    assert revoked.status == 401
    assert revoked.message == "Token has been invalidated"
