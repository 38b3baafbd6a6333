"""Client for the optional Google profile lookup."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from google_oauth.clients.google_auth import provider_client
from google_oauth.core.config import GoogleOAuthSettings


class ProfileFetchError(Exception):
    """Raised when profile data cannot be retrieved for an access token."""


class GoogleProfileClient:
    """Retrieve extended profile data with a bearer access token."""

    def __init__(
        self,
        settings: GoogleOAuthSettings,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._log = logger or logging.getLogger(__name__)

    async def fetch_profile(self, access_token: str) -> Any:
        headers = {"Authorization": f"Bearer {access_token}"}
        try:
            async with provider_client(self._http, self._settings.http_timeout_seconds) as client:
                response = await client.get(self._settings.profile_url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ProfileFetchError(f"Profile request failed: {exc}") from exc

        if not response.is_success:
            raise ProfileFetchError(
                f"Profile endpoint returned {response.status_code}: {response.text}"
            )

        try:
            profile = response.json()
        except ValueError as exc:
            raise ProfileFetchError("Profile endpoint returned a non-JSON body.") from exc

        self._log.debug("Fetched profile data")
        return profile


__all__ = ["GoogleProfileClient", "ProfileFetchError"]
