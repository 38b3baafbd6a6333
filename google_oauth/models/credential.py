"""
Domain models for the session-bound Google credential.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdentityClaims(BaseModel):
    """Subject and email asserted by the provider's id_token."""

    model_config = ConfigDict(frozen=True)

    subject_id: str
    email: Optional[str] = None


class TokenGrant(BaseModel):
    """A parsed token endpoint response, before it is bound to a session."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    expires_at: datetime
    refresh_token: Optional[str] = None
    identity: Optional[IdentityClaims] = None

    @classmethod
    def from_expires_in(
        cls,
        *,
        access_token: str,
        expires_in: int,
        acquired_at: datetime,
        refresh_token: Optional[str] = None,
        identity: Optional[IdentityClaims] = None,
    ) -> "TokenGrant":
        return cls(
            access_token=access_token,
            expires_at=acquired_at + timedelta(seconds=expires_in),
            refresh_token=refresh_token,
            identity=identity,
        )


class Credential(BaseModel):
    """The credential stored in a session after a successful code exchange."""

    model_config = ConfigDict(frozen=True)

    subject_id: str = Field(..., description="Stable subject identifier from Google.")
    email: Optional[str] = Field(None, description="Provider-asserted email address.")
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: datetime
    profile: Optional[Any] = Field(
        None, description="Profile data, attached once when profile retrieval is enabled."
    )

    def is_fresh(self, now: datetime) -> bool:
        return self.expires_at > now

    def with_profile(self, profile: Any) -> "Credential":
        return self.model_copy(update={"profile": profile})

    def apply_refresh(self, grant: TokenGrant) -> "Credential":
        """
        Build the credential that replaces this one after a refresh.

        The previous refresh token is kept when Google does not rotate it, and
        the profile is carried forward untouched.
        """
        update: dict[str, Any] = {
            "access_token": grant.access_token,
            "expires_at": grant.expires_at,
            "refresh_token": grant.refresh_token or self.refresh_token,
        }
        if grant.identity is not None:
            update["subject_id"] = grant.identity.subject_id
            update["email"] = grant.identity.email or self.email
        return self.model_copy(update=update)


class ProjectedIdentity(BaseModel):
    """Request-scoped view of the signed-in user."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    access_token: str
    profile: Optional[Any] = None

    @classmethod
    def from_credential(cls, credential: Credential) -> "ProjectedIdentity":
        return cls(
            id=credential.subject_id,
            email=credential.email,
            access_token=credential.access_token,
            profile=credential.profile,
        )


__all__ = [
    "Credential",
    "IdentityClaims",
    "ProjectedIdentity",
    "TokenGrant",
    "utcnow",
]
