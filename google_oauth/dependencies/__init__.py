"""Expose dependency helpers for FastAPI routers."""

from .auth import RequireGoogleUser, get_current_user
from .clients import (
    get_credential_manager,
    get_google_oauth_client,
    get_identity_token_decoder,
    get_profile_client,
    get_session_store,
    get_token_cipher_service,
)
from .config import SettingsDependency, get_app_settings
from .session import get_session_id, read_session_id

__all__ = [
    "RequireGoogleUser",
    "SettingsDependency",
    "get_app_settings",
    "get_credential_manager",
    "get_current_user",
    "get_google_oauth_client",
    "get_identity_token_decoder",
    "get_profile_client",
    "get_session_id",
    "get_session_store",
    "get_token_cipher_service",
    "read_session_id",
]
