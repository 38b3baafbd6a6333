"""
Decoding of the id_token returned by Google's token endpoint.

The id_token is read without signature verification. It is only ever taken
from the response of a direct TLS request to the token endpoint, never from
the browser, so the channel to Google is the trust boundary. Deployments that
want defense in depth can plug in ``JWKSIdTokenVerifier``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol, Sequence

import jwt

from google_oauth.models.credential import IdentityClaims

logger = logging.getLogger(__name__)


class MalformedTokenError(Exception):
    """Raised when an id_token cannot be decoded or carries no subject."""


class IdTokenVerifier(Protocol):
    def verify(self, id_token: str) -> Dict[str, Any]: ...


class JWKSIdTokenVerifier:
    """Verify id_token signatures against the provider's published key set."""

    def __init__(
        self,
        *,
        jwks_uri: str,
        audience: str,
        issuers: Sequence[str],
        jwk_client: Optional[jwt.PyJWKClient] = None,
    ) -> None:
        self._audience = audience
        self._issuers = list(issuers)
        # PyJWKClient caches the key set, so only the first call and key
        # rotations hit the network.
        self._jwk_client = jwk_client or jwt.PyJWKClient(jwks_uri)

    def verify(self, id_token: str) -> Dict[str, Any]:
        try:
            signing_key = self._jwk_client.get_signing_key_from_jwt(id_token)
            return jwt.decode(
                id_token,
                key=signing_key.key,
                algorithms=["RS256"],
                audience=self._audience,
                issuer=self._issuers,
                options={"require": ["exp", "iat", "iss", "aud", "sub"]},
            )
        except jwt.PyJWTError as exc:
            raise MalformedTokenError(f"id_token failed verification: {exc}") from exc


class IdentityTokenDecoder:
    """Extract subject and email claims from an id_token."""

    def __init__(self, verifier: Optional[IdTokenVerifier] = None) -> None:
        self._verifier = verifier

    def decode(self, id_token: str) -> IdentityClaims:
        if not id_token:
            raise MalformedTokenError("id_token is empty.")

        if self._verifier is not None:
            claims = self._verifier.verify(id_token)
        else:
            try:
                claims = jwt.decode(id_token, options={"verify_signature": False})
            except jwt.PyJWTError as exc:
                raise MalformedTokenError(f"Unable to decode id_token: {exc}") from exc

        if not isinstance(claims, dict):
            raise MalformedTokenError("id_token payload is not a JSON object.")

        subject = claims.get("sub")
        if not subject:
            raise MalformedTokenError("id_token payload has no subject claim.")

        email = claims.get("email")
        logger.debug("Decoded id_token for subject %s", subject)
        return IdentityClaims(subject_id=str(subject), email=str(email) if email else None)


__all__ = [
    "IdTokenVerifier",
    "IdentityTokenDecoder",
    "JWKSIdTokenVerifier",
    "MalformedTokenError",
]
