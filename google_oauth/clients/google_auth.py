"""
Google OAuth utilities.

These helpers perform the token endpoint exchanges behind the login flow and
the best-effort token revocation used on sign-out.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from http import HTTPStatus
from typing import Any, AsyncIterator, Callable, Dict, Optional
from urllib.parse import urlencode

import httpx

from google_oauth.clients.id_token import IdentityTokenDecoder
from google_oauth.core.config import GoogleOAuthSettings
from google_oauth.models.credential import Credential, TokenGrant, utcnow


class TokenExchangeError(Exception):
    """Raised when the token endpoint rejects an exchange or refresh."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = int(status_code)
        self.body = body
        super().__init__(f"Token endpoint returned {self.status_code}: {body}")


class TokenRevocationError(Exception):
    """A revocation attempt failed. Only ever logged."""


@asynccontextmanager
async def provider_client(
    shared: Optional[httpx.AsyncClient], timeout: Optional[float]
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one closed on exit."""
    if shared is not None:
        yield shared
        return
    async with httpx.AsyncClient(timeout=timeout) as client:
        yield client


class GoogleOAuthClient:
    """Exchange authorization codes and refresh tokens with Google."""

    def __init__(
        self,
        settings: GoogleOAuthSettings,
        *,
        decoder: Optional[IdentityTokenDecoder] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], datetime] = utcnow,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings
        self._decoder = decoder or IdentityTokenDecoder()
        self._http = http_client
        self._clock = clock
        self._log = logger or logging.getLogger(__name__)

    def build_authorization_url(self, state: Optional[str] = None) -> str:
        """Construct the Google OAuth consent URL."""
        params = {
            "client_id": self._settings.client_id,
            "redirect_uri": str(self._settings.redirect_uri),
            "response_type": "code",
            "scope": " ".join(self._settings.scopes),
            "access_type": "offline",
            "include_granted_scopes": "true",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return f"{self._settings.authorize_url}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> Credential:
        """Exchange an authorization code for a session credential without profile."""
        payload = {
            "code": code,
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "grant_type": "authorization_code",
            "redirect_uri": str(self._settings.redirect_uri),
        }
        token_payload = await self._request_token(payload)

        id_token = token_payload.get("id_token")
        if not id_token:
            raise TokenExchangeError(
                HTTPStatus.BAD_GATEWAY,
                "Incomplete token payload returned from Google.",
            )

        grant = self._grant_from_payload(token_payload)
        identity = self._decoder.decode(id_token)
        if grant.refresh_token is None:
            # Codes minted without offline consent come back without one.
            self._log.info("Token response for subject %s has no refresh_token", identity.subject_id)
        return Credential(
            subject_id=identity.subject_id,
            email=identity.email,
            access_token=grant.access_token,
            refresh_token=grant.refresh_token,
            expires_at=grant.expires_at,
        )

    async def refresh_token(self, refresh_token: str) -> TokenGrant:
        """
        Refresh the access token using a stored refresh token.

        Google usually omits ``refresh_token`` from the response; the caller
        keeps its current one in that case.
        """
        payload = {
            "refresh_token": refresh_token,
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "grant_type": "refresh_token",
            "redirect_uri": str(self._settings.redirect_uri),
        }
        token_payload = await self._request_token(payload)
        grant = self._grant_from_payload(token_payload)

        id_token = token_payload.get("id_token")
        if id_token:
            grant = grant.model_copy(update={"identity": self._decoder.decode(id_token)})
        return grant

    async def revoke(self, token: str, *, kind: str = "token") -> None:
        """Best-effort revocation. Failures are logged and never raised."""
        try:
            status_code = await self._revoke(token)
        except TokenRevocationError as exc:
            self._log.warning("Error revoking %s: %s", kind, exc)
            return
        self._log.debug("Revoked %s, %s", kind, status_code)

    async def _revoke(self, token: str) -> int:
        try:
            async with provider_client(self._http, self._settings.http_timeout_seconds) as client:
                response = await client.get(self._settings.revoke_url, params={"token": token})
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TokenRevocationError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise TokenRevocationError(f"status {response.status_code}: {response.text}")
        return response.status_code

    async def _request_token(self, payload: Dict[str, str]) -> Dict[str, Any]:
        self._log.debug("Requesting token with grant_type=%s", payload["grant_type"])
        try:
            async with provider_client(self._http, self._settings.http_timeout_seconds) as client:
                response = await client.post(self._settings.token_url, data=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TokenExchangeError(
                HTTPStatus.BAD_GATEWAY, f"Token endpoint unreachable: {exc}"
            ) from exc

        if response.status_code != HTTPStatus.OK:
            raise TokenExchangeError(response.status_code, response.text)

        try:
            token_payload = response.json()
        except ValueError as exc:
            raise TokenExchangeError(
                HTTPStatus.BAD_GATEWAY, "Token endpoint returned a non-JSON body."
            ) from exc
        if not isinstance(token_payload, dict):
            raise TokenExchangeError(
                HTTPStatus.BAD_GATEWAY, "Token endpoint returned a non-object body."
            )

        self._log.debug("Got response back from token endpoint")
        return token_payload

    def _grant_from_payload(self, token_payload: Dict[str, Any]) -> TokenGrant:
        access_token = token_payload.get("access_token")
        expires_in = token_payload.get("expires_in")
        if not access_token or expires_in is None:
            raise TokenExchangeError(
                HTTPStatus.BAD_GATEWAY,
                "Incomplete token payload returned from Google.",
            )
        try:
            expires_in_seconds = int(expires_in)
        except (TypeError, ValueError) as exc:
            raise TokenExchangeError(
                HTTPStatus.BAD_GATEWAY, f"Invalid expires_in value: {expires_in!r}"
            ) from exc

        return TokenGrant.from_expires_in(
            access_token=access_token,
            expires_in=expires_in_seconds,
            acquired_at=self._clock(),
            refresh_token=token_payload.get("refresh_token") or None,
        )


__all__ = [
    "GoogleOAuthClient",
    "TokenExchangeError",
    "TokenRevocationError",
    "provider_client",
]
