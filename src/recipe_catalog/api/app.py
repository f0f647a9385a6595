"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from recipe_catalog.api.auth import router as auth_router
from recipe_catalog.api.objects import router as objects_router
from recipe_catalog.api.recipes import router as recipes_router
from recipe_catalog.app_logging import configure_logging
from recipe_catalog.containers import AppContainer
from recipe_catalog.domain.errors import (
    DuplicateKey,
    ExpiredTarget,
    StorageUnavailable,
    ValidationFailed,
)

SESSION_COOKIE = "recipe_catalog_session"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting recipe catalog: environment=%s backend=%s",
            settings.environment,
            settings.storage_backend,
        )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=SESSION_COOKIE,
        max_age=settings.session_max_age_seconds,
        same_site="lax",
        https_only=settings.environment not in {"local", "test"},
    )

    app.include_router(auth_router)
    app.include_router(recipes_router)
    app.include_router(objects_router)

    @app.exception_handler(ValidationFailed)
    async def validation_failed(_: Request, exc: ValidationFailed) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "errors": exc.errors},
        )

    @app.exception_handler(DuplicateKey)
    async def duplicate_key(_: Request, exc: DuplicateKey) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(ExpiredTarget)
    async def expired_target(_: Request, exc: ExpiredTarget) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_410_GONE, content={"detail": str(exc)}
        )

    @app.exception_handler(StorageUnavailable)
    async def storage_unavailable(
        request: Request, exc: StorageUnavailable
    ) -> JSONResponse:
        logger.exception(
            "Storage unavailable", extra={"path": request.url.path}, exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage temporarily unavailable"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        """Liveness probe alias."""
        return {"status": "ok"}

    return app
