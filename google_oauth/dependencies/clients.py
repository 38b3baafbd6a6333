"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Optional

from google_oauth.clients import (
    GoogleOAuthClient,
    GoogleProfileClient,
    IdentityTokenDecoder,
    InMemorySessionStore,
    JWKSIdTokenVerifier,
    SessionStore,
    SQLiteSessionStore,
)
from google_oauth.core.config import get_settings
from google_oauth.services import CredentialLifecycleManager, TokenCipherService


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_identity_token_decoder() -> IdentityTokenDecoder:
    """Provide the id_token decoder, verifying signatures only when configured."""
    google = _settings().google
    verifier = None
    if google.verify_id_token:
        verifier = JWKSIdTokenVerifier(
            jwks_uri=google.jwks_uri,
            audience=google.client_id,
            issuers=google.issuers,
        )
    return IdentityTokenDecoder(verifier=verifier)


@lru_cache()
def get_google_oauth_client() -> GoogleOAuthClient:
    """Create a singleton Google OAuth client."""
    return GoogleOAuthClient(_settings().google, decoder=get_identity_token_decoder())


@lru_cache()
def get_profile_client() -> Optional[GoogleProfileClient]:
    """Provide the profile client when profile retrieval is enabled."""
    google = _settings().google
    if not google.profile_enabled:
        return None
    return GoogleProfileClient(google)


@lru_cache()
def get_token_cipher_service() -> TokenCipherService:
    """Provide symmetric encryption helper for token storage."""
    settings = _settings()
    return TokenCipherService.from_secrets(
        settings.security.token_encryption_secret,
        settings.google.client_secret,
    )


@lru_cache()
def get_session_store() -> SessionStore:
    """Provide the configured session credential store."""
    settings = _settings()
    if settings.session.backend == "sqlite":
        return SQLiteSessionStore(settings.session.db_path, get_token_cipher_service())
    return InMemorySessionStore()


@lru_cache()
def get_credential_manager() -> CredentialLifecycleManager:
    """Provide the credential lifecycle manager shared by all requests."""
    settings = _settings()
    return CredentialLifecycleManager(
        store=get_session_store(),
        oauth_client=get_google_oauth_client(),
        profile_client=get_profile_client(),
        profile_enabled=settings.google.profile_enabled,
    )


__all__ = [
    "get_credential_manager",
    "get_google_oauth_client",
    "get_identity_token_decoder",
    "get_profile_client",
    "get_session_store",
    "get_token_cipher_service",
]
