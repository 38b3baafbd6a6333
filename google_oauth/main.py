"""
FastAPI application entrypoint for the Google login flow.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from google_oauth.api.routes import build_auth_router, router as api_router
from google_oauth.clients import MalformedTokenError, ProfileFetchError, TokenExchangeError
from google_oauth.core.config import get_settings
from google_oauth.core.logging import configure_logging

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Map provider failures escaping the request gate onto HTTP responses."""

    @app.exception_handler(TokenExchangeError)
    async def _token_exchange_failed(request: Request, exc: TokenExchangeError):
        logger.warning("Token refresh failed with %s for %s", exc.status_code, request.url.path)
        return PlainTextResponse(exc.body, status_code=exc.status_code)

    @app.exception_handler(MalformedTokenError)
    @app.exception_handler(ProfileFetchError)
    async def _provider_response_unusable(request: Request, exc: Exception):
        logger.error("Unusable provider response for %s: %s", request.url.path, exc)
        return JSONResponse(status_code=HTTPStatus.BAD_GATEWAY, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Google OAuth Session",
        version="0.1.0",
        description="Google authorization code login bound to a server-side session.",
    )
    app.include_router(build_auth_router(settings.google))
    app.include_router(api_router, prefix="/api")
    register_exception_handlers(app)
    return app


app = create_app()

__all__ = ["app", "create_app", "register_exception_handlers"]
