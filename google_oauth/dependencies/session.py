"""
Session identifier carried in a signed cookie.

The cookie only holds an opaque random id; the credential itself stays in the
server-side session store.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, URLSafeSerializer

from google_oauth.core.config import AppSettings
from google_oauth.dependencies.config import SettingsDependency

logger = logging.getLogger(__name__)

SESSION_SALT = "google-oauth-session-v1"


def _serializer(settings: AppSettings) -> URLSafeSerializer:
    secret = settings.session.secret or settings.google.client_secret
    return URLSafeSerializer(secret_key=secret, salt=SESSION_SALT)


def read_session_id(request: Request, settings: AppSettings) -> Optional[str]:
    """Return the session id from a valid cookie, or None."""
    raw = request.cookies.get(settings.session.cookie_name)
    if not raw:
        return None
    try:
        session_id = _serializer(settings).loads(raw)
    except BadSignature:
        logger.debug("Ignoring session cookie with a bad signature")
        return None
    return session_id if isinstance(session_id, str) and session_id else None


def issue_session_cookie(response: Response, settings: AppSettings, session_id: str) -> None:
    response.set_cookie(
        key=settings.session.cookie_name,
        value=_serializer(settings).dumps(session_id),
        max_age=settings.session.cookie_max_age_seconds,
        httponly=True,
        secure=settings.session.cookie_secure,
        samesite="lax",
        path="/",
    )


def get_session_id(
    request: Request,
    response: Response,
    settings: AppSettings = SettingsDependency,
) -> str:
    """FastAPI dependency returning the session id, minting one when absent."""
    session_id = read_session_id(request, settings)
    if session_id is None:
        session_id = secrets.token_urlsafe(32)
        issue_session_cookie(response, settings, session_id)
    request.state.session_id = session_id
    return session_id


__all__ = ["get_session_id", "issue_session_cookie", "read_session_id"]
