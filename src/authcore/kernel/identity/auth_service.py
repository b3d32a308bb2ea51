"""
Authentication service: register, login, verify and refresh.

Every user-facing failure comes back as an ``AuthFailure`` result. Errors
raised by the store, hasher or token codec are not interpreted and
propagate to the caller unchanged.
"""

import asyncio
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from authcore.config import AuthSettings, get_settings
from authcore.kernel.identity.errors import (
    AuthError,
    ConfigurationError,
    ConflictError,
    CredentialError,
    NotFoundError,
    TokenError,
    TokenTypeError,
    UserAlreadyExistsError,
)
from authcore.kernel.identity.jwt import Expiry, JWTManager, TokenCodec, parse_expiry
from authcore.kernel.identity.password import CredentialHasher, PasswordHasher
from authcore.kernel.identity.projection import (
    as_dict,
    refresh_token_version,
    strip_sensitive,
)
from authcore.kernel.identity.store import CallableUserStore, UserRecord, UserStore
from authcore.kernel.identity.validation import validate
from authcore.logging_config import bind_user, get_logger, operation_context
from authcore.schemas.auth import (
    AuthFailure,
    LoginInput,
    LoginSuccess,
    RefreshSuccess,
    RegisterInput,
    RegisterSuccess,
    VerifySuccess,
)

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

RegisterResult = Union[RegisterSuccess, AuthFailure]
LoginResult = Union[LoginSuccess, AuthFailure]
VerifyResult = Union[VerifySuccess, AuthFailure]
RefreshResult = Union[RefreshSuccess, AuthFailure]


class AuthService:
    """
    Email/password authentication with versioned refresh tokens.

    Holds no per-request state, so one instance can serve concurrent calls.

    Usage:
        auth = AuthService(InMemoryUserStore(), secret="...")
        result = await auth.register({"email": "a@x.com", "password": "secret1"})
    """

    def __init__(
        self,
        store: UserStore,
        secret: Optional[str] = None,
        access_token_expiry: Optional[Expiry] = None,
        refresh_token_expiry: Optional[Expiry] = None,
        hasher: Optional[CredentialHasher] = None,
        tokens: Optional[TokenCodec] = None,
        settings: Optional[AuthSettings] = None,
    ):
        settings = settings or get_settings()

        self.store = store
        self.access_token_expiry = (
            settings.access_token_expiry if access_token_expiry is None else access_token_expiry
        )
        self.refresh_token_expiry = (
            settings.refresh_token_expiry if refresh_token_expiry is None else refresh_token_expiry
        )

        # Expiry strings are parsed once, here
        for name in ("access_token_expiry", "refresh_token_expiry"):
            try:
                parse_expiry(getattr(self, name))
            except ValueError as exc:
                raise ConfigurationError(f"{name}: {exc}") from exc

        if tokens is None:
            secret = secret or settings.secret_key
            if not secret:
                raise ConfigurationError("A signing secret is required")
            tokens = JWTManager(secret, algorithm=settings.algorithm)

        self.tokens = tokens
        self.hasher = hasher or PasswordHasher(rounds=settings.bcrypt_rounds)

    @property
    def expires_in(self) -> str:
        """Access token lifetime as reported to clients."""
        value = self.access_token_expiry
        return value if isinstance(value, str) else str(int(parse_expiry(value).total_seconds()))

    # ── Operations ─────────────────────────────────────────────────────

    async def register(self, data: Any) -> RegisterResult:
        """
        Register a new user.

        Returns:
            RegisterSuccess (201) with the safe user, or AuthFailure
            (400 validation error, 400 duplicate email)
        """
        with operation_context("register"):
            try:
                return await self._register(data)
            except AuthError as exc:
                logger.info("Registration rejected: %s", exc.message)
                return exc.to_result()

    async def login(self, data: Any) -> LoginResult:
        """
        Authenticate with email and password and issue a token pair.

        Returns:
            LoginSuccess, or AuthFailure (400 validation error, 404 unknown
            email, 401 wrong password)
        """
        with operation_context("login"):
            try:
                return await self._login(data)
            except AuthError as exc:
                logger.info("Login rejected: %s", exc.message)
                return exc.to_result()

    def verify(self, token: str) -> VerifyResult:
        """
        Verify any well-signed token, access or refresh.

        The token type is not checked; callers needing access-only
        semantics must inspect ``payload["type"]``.
        """
        with operation_context("verify"):
            try:
                return VerifySuccess(payload=self._decode(token))
            except AuthError as exc:
                logger.debug("Token verification failed")
                return exc.to_result()

    async def refresh(self, refresh_token: str) -> RefreshResult:
        """
        Exchange a refresh token for a new access token.

        The refresh token itself is not rotated.

        Returns:
            RefreshSuccess, or AuthFailure (401 invalid/expired, 400 wrong
            token type, 401 invalidated)
        """
        with operation_context("refresh"):
            try:
                return await self._refresh(refresh_token)
            except AuthError as exc:
                logger.info("Refresh rejected: %s", exc.message)
                return exc.to_result()

    # ── Steps ──────────────────────────────────────────────────────────

    async def _register(self, data: Any) -> RegisterSuccess:
        outcome = validate(RegisterInput, data)
        if not outcome.valid:
            raise outcome.to_error()
        credentials: RegisterInput = outcome.data

        # Existence check precedes hashing
        if await self.store.find_by_email(credentials.email) is not None:
            raise ConflictError()

        password_hash = await asyncio.to_thread(self.hasher.hash, credentials.password)
        try:
            created = await self.store.create({
                **credentials.extra_fields,
                "email": credentials.email,
                "password_hash": password_hash,
            })
        except UserAlreadyExistsError as exc:
            # Lost a race with a concurrent registration
            raise ConflictError() from exc

        user = strip_sensitive(created)
        bind_user(user.get("id"))
        logger.info("Registered user")
        return RegisterSuccess(user=user)

    async def _login(self, data: Any) -> LoginSuccess:
        outcome = validate(LoginInput, data)
        if not outcome.valid:
            raise outcome.to_error()
        credentials: LoginInput = outcome.data

        found = await self.store.find_by_email(credentials.email)
        if found is None:
            raise NotFoundError()
        user = as_dict(found)
        bind_user(user.get("id"))

        matches = await asyncio.to_thread(
            self.hasher.verify, credentials.password, user.get("password_hash") or ""
        )
        if not matches:
            raise CredentialError()

        access_token = self._issue_access_token(user)
        refresh_token = self.tokens.sign(
            {
                "id": user["id"],
                "type": REFRESH_TOKEN_TYPE,
                "version": refresh_token_version(user),
            },
            self.refresh_token_expiry,
        )

        logger.info("User logged in")
        return LoginSuccess(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.expires_in,
        )

    async def _refresh(self, refresh_token: str) -> RefreshSuccess:
        payload = self._decode(refresh_token)

        if payload.get("type") != REFRESH_TOKEN_TYPE:
            raise TokenTypeError()

        user_id = payload.get("id")
        bind_user(user_id)
        found = await self.store.find_by_id(user_id) if user_id is not None else None
        if found is None or refresh_token_version(found) != payload.get("version"):
            raise TokenError("Token has been invalidated")

        logger.info("Access token refreshed")
        return RefreshSuccess(
            access_token=self._issue_access_token(found),
            expires_in=self.expires_in,
        )

    def _decode(self, token: str) -> dict:
        payload = self.tokens.decode(token)
        if not payload:
            raise TokenError()
        return payload

    def _issue_access_token(self, user: Mapping[str, Any]) -> str:
        return self.tokens.sign(
            {**strip_sensitive(user), "type": ACCESS_TOKEN_TYPE},
            self.access_token_expiry,
        )


def create_auth(
    *,
    secret: str,
    find_by_email: Callable[[str], Awaitable[Optional[UserRecord]]],
    find_by_id: Callable[[str], Awaitable[Optional[UserRecord]]],
    create: Callable[[Mapping[str, Any]], Awaitable[UserRecord]],
    access_token_expiry: Expiry = "15m",
    refresh_token_expiry: Expiry = "7d",
    hasher: Optional[CredentialHasher] = None,
) -> AuthService:
    """Build an AuthService from three store functions."""
    return AuthService(
        CallableUserStore(find_by_email, find_by_id, create),
        secret=secret,
        access_token_expiry=access_token_expiry,
        refresh_token_expiry=refresh_token_expiry,
        hasher=hasher,
    )
