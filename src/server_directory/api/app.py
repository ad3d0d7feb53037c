"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from server_directory.api.auth import router as auth_router
from server_directory.api.listings import router as listings_router
from server_directory.api.pages import INDEX_HTML
from server_directory.app_logging import configure_logging
from server_directory.containers import AppContainer
from server_directory.domain.errors import (
    AuthenticationRequiredError,
    AuthorizationDeniedError,
    InvalidActionError,
    ListingNotFoundError,
    StorageError,
    UpstreamAuthError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        SessionMiddleware,
        secret_key=container.settings.session_secret,
        https_only=container.settings.vercel_url is not None,
    )

    app.include_router(auth_router)
    app.include_router(listings_router)
    if container.uploads_dir is not None:
        app.mount(
            "/uploads",
            StaticFiles(directory=container.uploads_dir, check_dir=False),
            name="uploads",
        )

    @app.exception_handler(AuthenticationRequiredError)
    async def authentication_required(
        request: Request, exc: AuthenticationRequiredError
    ) -> RedirectResponse:
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(AuthorizationDeniedError)
    async def authorization_denied(
        request: Request, exc: AuthorizationDeniedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)}
        )

    @app.exception_handler(InvalidActionError)
    async def invalid_action(request: Request, exc: InvalidActionError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.exception_handler(ListingNotFoundError)
    async def listing_not_found(
        request: Request, exc: ListingNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(StorageError)
    async def storage_failure(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(
            "Listing store failure",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": _format_error(container, exc, "Storage failure")},
        )

    @app.exception_handler(UpstreamAuthError)
    async def upstream_failure(
        request: Request, exc: UpstreamAuthError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Authentication failed"},
        )

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Landing page listing approved servers."""
        return HTMLResponse(INDEX_HTML)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _format_error(container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
