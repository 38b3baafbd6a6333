"""Expose constructed client wrappers."""

from .google_auth import GoogleOAuthClient, TokenExchangeError, TokenRevocationError
from .google_profile import GoogleProfileClient, ProfileFetchError
from .id_token import IdentityTokenDecoder, JWKSIdTokenVerifier, MalformedTokenError
from .session_store import InMemorySessionStore, SessionStore, SQLiteSessionStore

__all__ = [
    "GoogleOAuthClient",
    "GoogleProfileClient",
    "IdentityTokenDecoder",
    "InMemorySessionStore",
    "JWKSIdTokenVerifier",
    "MalformedTokenError",
    "ProfileFetchError",
    "SQLiteSessionStore",
    "SessionStore",
    "TokenExchangeError",
    "TokenRevocationError",
]
