"""
Lifecycle of the Google credential bound to a session.

A session is in one of three states: no credential, a fresh credential, or an
expired one. Only a code exchange moves a session out of ``NO_CREDENTIAL``;
wall-clock time alone turns ``FRESH`` into ``EXPIRED``; a refresh turns it
back; sign-out returns any state to ``NO_CREDENTIAL``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Tuple

from google_oauth.clients.google_auth import GoogleOAuthClient
from google_oauth.clients.google_profile import GoogleProfileClient
from google_oauth.clients.session_store import SessionStore
from google_oauth.models.credential import Credential, ProjectedIdentity, utcnow
from google_oauth.services.token_cipher import TokenDecryptionError


class MissingAuthCodeError(Exception):
    """Raised when a callback request carries no authorization code."""


class NotAuthenticatedError(Exception):
    """Raised when a session holds no credential."""


class CredentialState(str, Enum):
    NO_CREDENTIAL = "no_credential"
    FRESH = "fresh"
    EXPIRED = "expired"


class CredentialLifecycleManager:
    """Acquire, validate, refresh and revoke the credential stored per session."""

    def __init__(
        self,
        *,
        store: SessionStore,
        oauth_client: GoogleOAuthClient,
        profile_client: Optional[GoogleProfileClient] = None,
        profile_enabled: bool = False,
        clock: Callable[[], datetime] = utcnow,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if profile_enabled and profile_client is None:
            raise ValueError("A profile client is required when profile retrieval is enabled.")
        self._store = store
        self._oauth = oauth_client
        self._profile = profile_client
        self._profile_enabled = profile_enabled
        self._clock = clock
        self._log = logger or logging.getLogger(__name__)

    def _load(self, session_id: str) -> Optional[Credential]:
        try:
            return self._store.get(session_id)
        except TokenDecryptionError as exc:
            self._log.warning("Ignoring unreadable stored credential: %s", exc)
            return None

    def inspect(self, session_id: str) -> Tuple[CredentialState, Optional[Credential]]:
        """
        Report the session state without any network I/O.

        A stored record that can no longer be decrypted counts as no credential.
        """
        credential = self._load(session_id)
        if credential is None:
            return CredentialState.NO_CREDENTIAL, None
        if credential.is_fresh(self._clock()):
            return CredentialState.FRESH, credential
        return CredentialState.EXPIRED, credential

    async def authenticate_request(self, session_id: str) -> ProjectedIdentity:
        """
        Resolve the identity for a request, refreshing an expired credential.

        Raises ``NotAuthenticatedError`` when the session has no credential.
        Refresh failures propagate as they are and leave the stored credential
        in place, so a later request can try again.
        """
        state, credential = self.inspect(session_id)
        if state is CredentialState.NO_CREDENTIAL or credential is None:
            raise NotAuthenticatedError("No credential stored for this session.")

        if state is CredentialState.EXPIRED:
            self._log.debug("Access token expired. Getting new token.")
            credential = await self.refresh(session_id, credential)

        return ProjectedIdentity.from_credential(credential)

    async def refresh(self, session_id: str, credential: Credential) -> Credential:
        if not credential.refresh_token:
            raise NotAuthenticatedError("Credential expired and holds no refresh token.")
        grant = await self._oauth.refresh_token(credential.refresh_token)
        refreshed = credential.apply_refresh(grant)
        # Written whole and only after the exchange succeeded; a concurrent
        # refresh of the same session may overwrite it with its own result.
        self._store.set(session_id, refreshed)
        return refreshed

    async def complete_code_exchange(self, session_id: str, code: Optional[str]) -> Credential:
        """
        Exchange an authorization code and bind the credential to the session.

        With profile retrieval enabled, the profile is fetched after the
        credential has been stored. A failed fetch raises ``ProfileFetchError``
        and leaves the profile-less credential in the session.
        """
        if not code:
            raise MissingAuthCodeError("Missing auth code")

        credential = await self._oauth.exchange_authorization_code(code)
        self._store.set(session_id, credential)
        self._log.info("Stored credential for subject %s", credential.subject_id)

        if self._profile_enabled and self._profile is not None:
            profile = await self._profile.fetch_profile(credential.access_token)
            credential = credential.with_profile(profile)
            self._store.set(session_id, credential)

        return credential

    async def sign_out(self, session_id: str) -> None:
        """Clear the session credential, then revoke its tokens best-effort."""
        self._log.debug("Signing out session")
        try:
            credential = self._load(session_id)
        finally:
            self._store.delete(session_id)
        if credential is None:
            return

        revocations = [self._oauth.revoke(credential.access_token, kind="access token")]
        if credential.refresh_token:
            revocations.append(self._oauth.revoke(credential.refresh_token, kind="refresh token"))
        await asyncio.gather(*revocations)


__all__ = [
    "CredentialLifecycleManager",
    "CredentialState",
    "MissingAuthCodeError",
    "NotAuthenticatedError",
]
