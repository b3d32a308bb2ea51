"""
FastAPI application exposing the authentication core.

``create_app(auth)`` serves an injected AuthService; without one the app
builds a SQL-backed service from settings and owns the engine.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from authcore.api.v1 import router as api_v1_router
from authcore.config import AuthSettings, get_settings
from authcore.database import create_engine, create_session_maker, init_models
from authcore.kernel.identity.auth_service import AuthService
from authcore.kernel.identity.sql_store import SqlAlchemyUserStore
from authcore.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(
    auth: Optional[AuthService] = None,
    settings: Optional[AuthSettings] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        configure_logging(settings)
        logger.info("Starting %s v%s", settings.project_name, settings.version)

        if auth is not None:
            yield
            return

        engine = create_engine(settings.database_url, echo=settings.debug)
        await init_models(engine)
        app.state.auth = AuthService(
            SqlAlchemyUserStore(create_session_maker(engine)),
            settings=settings,
        )
        logger.info("User store initialized")
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("Database connections closed")

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
    )
    if auth is not None:
        app.state.auth = auth

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Store/hasher failures surface as a generic 500."""
        logger.exception("Unhandled exception: %s", exc)
        content = {"detail": "Internal server error"}
        if settings.debug:
            content = {"detail": str(exc), "type": type(exc).__name__}
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
        )

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "ok", "version": settings.version}

    app.include_router(api_v1_router)
    return app
