"""
FastAPI routes for the Google login flow.

The callback, sign-out and login routes live at configurable paths and are
built by ``build_auth_router``; the fixed API routes hang off ``router``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Optional
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from pydantic import ValidationError

from google_oauth.clients import (
    GoogleOAuthClient,
    MalformedTokenError,
    ProfileFetchError,
    TokenExchangeError,
)
from google_oauth.core.config import GoogleOAuthSettings
from google_oauth.dependencies import (
    RequireGoogleUser,
    get_credential_manager,
    get_google_oauth_client,
    get_session_id,
)
from google_oauth.models.credential import ProjectedIdentity
from google_oauth.schemas import AuthCodePayload, IdentityResponse, StatusResponse
from google_oauth.services import CredentialLifecycleManager, MissingAuthCodeError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get("/me", response_model=IdentityResponse)
async def read_current_user(user: ProjectedIdentity = RequireGoogleUser) -> IdentityResponse:
    return IdentityResponse(id=user.id, email=user.email, profile=user.profile)


async def extract_auth_code(request: Request) -> Optional[str]:
    """
    Find the authorization code on a callback request.

    The ``code`` query parameter wins. Otherwise the body is read as a JSON
    object with a ``code`` member, a form with a ``code`` field, or, for any
    other content type, as the bare code itself.
    """
    code = request.query_params.get("code")
    if code:
        logger.debug("Found auth code on query param")
        return code

    body = await request.body()
    if not body:
        return None

    content_type = request.headers.get("content-type", "").lower()
    if "application/json" in content_type:
        try:
            return AuthCodePayload.model_validate_json(body).code or None
        except ValidationError:
            return None

    text = body.decode("utf-8", errors="replace").strip()
    if "application/x-www-form-urlencoded" in content_type:
        values = parse_qs(text).get("code")
        return values[0] if values else None

    if text:
        logger.debug("Found auth code in body")
    return text or None


def _with_session_cookie(error: Response, response: Response) -> Response:
    """Copy cookies set by dependencies onto a response returned directly."""
    for value in response.headers.getlist("set-cookie"):
        error.headers.append("set-cookie", value)
    return error


async def handle_google_oauth_callback(
    request: Request,
    response: Response,
    manager: Annotated[CredentialLifecycleManager, Depends(get_credential_manager)],
    session_id: Annotated[str, Depends(get_session_id)],
) -> Response | StatusResponse:
    """Exchange the authorization code and bind the credential to the session."""
    code = await extract_auth_code(request)
    try:
        await manager.complete_code_exchange(session_id, code)
    except MissingAuthCodeError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc)) from exc
    except TokenExchangeError as exc:
        logger.warning("Authorization code exchange failed with %s", exc.status_code)
        return _with_session_cookie(
            PlainTextResponse(exc.body, status_code=exc.status_code), response
        )
    except MalformedTokenError as exc:
        logger.error("Provider returned an unusable id_token: %s", exc)
        return _with_session_cookie(
            JSONResponse(status_code=HTTPStatus.BAD_GATEWAY, content={"detail": str(exc)}),
            response,
        )
    except ProfileFetchError as exc:
        # The credential is already stored; the client still needs the cookie.
        logger.error("Profile retrieval failed after code exchange: %s", exc)
        return _with_session_cookie(
            JSONResponse(status_code=HTTPStatus.BAD_GATEWAY, content={"detail": str(exc)}),
            response,
        )

    return StatusResponse()


async def handle_google_signout(
    manager: Annotated[CredentialLifecycleManager, Depends(get_credential_manager)],
    session_id: Annotated[str, Depends(get_session_id)],
) -> StatusResponse:
    """Clear the session credential. Always succeeds."""
    await manager.sign_out(session_id)
    return StatusResponse()


async def start_google_login(
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
    state: Optional[str] = Query(
        default=None,
        description="Opaque value passed through to the callback unchanged.",
    ),
) -> RedirectResponse:
    """Redirect the browser to the Google consent screen."""
    return RedirectResponse(
        url=oauth_client.build_authorization_url(state=state),
        status_code=HTTPStatus.TEMPORARY_REDIRECT,
    )


def build_auth_router(settings: GoogleOAuthSettings) -> APIRouter:
    """Register the flow routes at the configured paths."""
    auth_router = APIRouter()
    auth_router.add_api_route(
        settings.callback_path,
        handle_google_oauth_callback,
        methods=["GET", "POST"],
        response_model=None,
    )
    if settings.signout_path:
        auth_router.add_api_route(
            settings.signout_path,
            handle_google_signout,
            methods=["GET", "POST"],
            response_model=StatusResponse,
        )
    else:
        logger.info("No sign-out path configured; sign-out route disabled")
    if settings.login_path:
        auth_router.add_api_route(
            settings.login_path,
            start_google_login,
            methods=["GET"],
            response_model=None,
        )
    return auth_router


__all__ = ["build_auth_router", "extract_auth_code", "router"]
