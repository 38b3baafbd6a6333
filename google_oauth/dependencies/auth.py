"""
Request gate for routes that need a signed-in Google user.

``RequireGoogleUser`` admits a request only when its session holds a fresh
credential, refreshing an expired one on the way. Refresh failures are not
turned into 401s; they propagate to the exception handlers registered by the
application.
"""

from __future__ import annotations

from http import HTTPStatus

from fastapi import Depends, HTTPException, Request

from google_oauth.dependencies.clients import get_credential_manager
from google_oauth.dependencies.session import get_session_id
from google_oauth.models.credential import ProjectedIdentity
from google_oauth.services import CredentialLifecycleManager, NotAuthenticatedError


async def get_current_user(
    request: Request,
    session_id: str = Depends(get_session_id),
    manager: CredentialLifecycleManager = Depends(get_credential_manager),
) -> ProjectedIdentity:
    try:
        identity = await manager.authenticate_request(session_id)
    except NotAuthenticatedError as exc:
        raise HTTPException(status_code=HTTPStatus.UNAUTHORIZED, detail=str(exc)) from exc
    request.state.user = identity
    return identity


RequireGoogleUser = Depends(get_current_user)

__all__ = ["RequireGoogleUser", "get_current_user"]
