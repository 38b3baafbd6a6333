"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app and the credential
lifecycle components share one validated configuration surface.
"""

from functools import lru_cache
from typing import Annotated, Literal, Optional

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_ENV_FILE = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    populate_by_name=True,
)


class GoogleOAuthSettings(BaseSettings):
    """Configuration required for the Google authorization code flow."""

    model_config = _ENV_FILE

    client_id: str = Field(..., validation_alias="GOOGLE_OAUTH_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="GOOGLE_OAUTH_CLIENT_SECRET")
    redirect_uri: AnyHttpUrl = Field(..., validation_alias="GOOGLE_OAUTH_REDIRECT_URI")
    profile_enabled: bool = Field(
        False,
        validation_alias="GOOGLE_OAUTH_PROFILE",
        description="Fetch the Google profile after the code exchange.",
    )
    callback_path: str = Field(
        "/auth/google/callback", validation_alias="GOOGLE_OAUTH_CALLBACK_PATH"
    )
    signout_path: Optional[str] = Field(
        "/auth/google/signout",
        validation_alias="GOOGLE_OAUTH_SIGNOUT_PATH",
        description="Sign-out route; an empty value disables it.",
    )
    login_path: Optional[str] = Field(
        "/auth/google/login", validation_alias="GOOGLE_OAUTH_LOGIN_PATH"
    )
    scopes: Annotated[tuple[str, ...], NoDecode] = Field(
        ("openid", "email", "profile"),
        validation_alias="GOOGLE_OAUTH_SCOPES",
    )
    token_url: str = Field(
        "https://oauth2.googleapis.com/token", validation_alias="GOOGLE_OAUTH_TOKEN_URL"
    )
    revoke_url: str = Field(
        "https://accounts.google.com/o/oauth2/revoke",
        validation_alias="GOOGLE_OAUTH_REVOKE_URL",
    )
    profile_url: str = Field(
        "https://www.googleapis.com/oauth2/v3/userinfo",
        validation_alias="GOOGLE_OAUTH_PROFILE_URL",
    )
    authorize_url: str = Field(
        "https://accounts.google.com/o/oauth2/v2/auth",
        validation_alias="GOOGLE_OAUTH_AUTHORIZE_URL",
    )
    verify_id_token: bool = Field(
        False,
        validation_alias="GOOGLE_OAUTH_VERIFY_ID_TOKEN",
        description=(
            "Verify id_token signatures against the provider JWKS. The token "
            "already arrives over a direct TLS channel to the token endpoint."
        ),
    )
    jwks_uri: str = Field(
        "https://www.googleapis.com/oauth2/v3/certs", validation_alias="GOOGLE_OAUTH_JWKS_URI"
    )
    issuers: Annotated[tuple[str, ...], NoDecode] = Field(
        ("https://accounts.google.com", "accounts.google.com"),
        validation_alias="GOOGLE_OAUTH_ISSUERS",
    )
    http_timeout_seconds: Optional[float] = Field(
        10.0,
        validation_alias="GOOGLE_OAUTH_HTTP_TIMEOUT",
        description="Timeout for provider calls; 0 disables it.",
    )

    @field_validator("scopes", "issuers", mode="before")
    @classmethod
    def _split_csv(cls, value: str | tuple[str, ...] | list[str]) -> tuple[str, ...]:
        """Support providing lists as a comma-separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(item.strip() for item in value.split(",") if item.strip())

    @field_validator("signout_path", "login_path", mode="before")
    @classmethod
    def _blank_path_disables(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not str(value).strip():
            return None
        return value

    @field_validator("http_timeout_seconds", mode="after")
    @classmethod
    def _zero_timeout_disables(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            return None
        return value


class SessionSettings(BaseSettings):
    """Where session credentials live and how the session cookie is issued."""

    model_config = _ENV_FILE

    backend: Literal["memory", "sqlite"] = Field("memory", validation_alias="SESSION_BACKEND")
    db_path: str = Field("data/sessions.db", validation_alias="SESSION_DB_PATH")
    secret: Optional[str] = Field(
        None,
        validation_alias="SESSION_SECRET",
        description="Key used to sign the session cookie. Defaults to the client secret.",
    )
    cookie_name: str = Field("google_oauth_session", validation_alias="SESSION_COOKIE_NAME")
    cookie_secure: bool = Field(False, validation_alias="SESSION_COOKIE_SECURE")
    cookie_max_age_seconds: int = Field(
        14 * 24 * 3600, validation_alias="SESSION_COOKIE_MAX_AGE"
    )


class SecuritySettings(BaseSettings):
    """Security-related configuration."""

    model_config = _ENV_FILE

    token_encryption_secret: Optional[str] = Field(
        None,
        validation_alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting stored tokens."
        ),
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = _ENV_FILE

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    google: GoogleOAuthSettings = Field(default_factory=GoogleOAuthSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "GoogleOAuthSettings",
    "SecuritySettings",
    "SessionSettings",
    "get_settings",
]
