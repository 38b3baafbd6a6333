try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from google_oauth.models.credential import (
    Credential,
    IdentityClaims,
    ProjectedIdentity,
    TokenGrant,
)

ACQUIRED_AT = datetime(2025, 4, 10, 18, 39, 48, tzinfo=timezone.utc)


def _credential() -> Credential:
    return Credential(
        subject_id="103117966615020283234",
        email="user@gmail.com",
        access_token="T1",
        refresh_token="R1",
        expires_at=ACQUIRED_AT + timedelta(seconds=3600),
        profile={"displayName": "Test User"},
    )


@pytest.mark.parametrize("expires_in", [0, 1, 3599, 3600, 86400])
def test_grant_expiration_is_acquisition_time_plus_lifetime(expires_in: int) -> None:
    grant = TokenGrant.from_expires_in(
        access_token="T", expires_in=expires_in, acquired_at=ACQUIRED_AT
    )

    assert grant.expires_at - ACQUIRED_AT == timedelta(milliseconds=expires_in * 1000)


def test_apply_refresh_keeps_refresh_token_and_profile() -> None:
    credential = _credential()
    later = ACQUIRED_AT + timedelta(hours=2)
    grant = TokenGrant.from_expires_in(access_token="T2", expires_in=3600, acquired_at=later)

    refreshed = credential.apply_refresh(grant)

    assert refreshed.access_token == "T2"
    assert refreshed.refresh_token == "R1"
    assert refreshed.expires_at == later + timedelta(seconds=3600)
    assert refreshed.profile == credential.profile
    assert refreshed.subject_id == credential.subject_id
    assert credential.access_token == "T1"


def test_apply_refresh_takes_rotated_token_and_new_identity() -> None:
    grant = TokenGrant.from_expires_in(
        access_token="T2",
        expires_in=3600,
        acquired_at=ACQUIRED_AT,
        refresh_token="R2",
        identity=IdentityClaims(subject_id="103117966615020283234", email="new@gmail.com"),
    )

    refreshed = _credential().apply_refresh(grant)

    assert refreshed.refresh_token == "R2"
    assert refreshed.email == "new@gmail.com"


def test_credentials_are_immutable() -> None:
    with pytest.raises(ValidationError):
        _credential().access_token = "tampered"  # type: ignore[misc]


def test_projected_identity_mirrors_credential() -> None:
    identity = ProjectedIdentity.from_credential(_credential())

    assert identity.model_dump() == {
        "id": "103117966615020283234",
        "email": "user@gmail.com",
        "access_token": "T1",
        "profile": {"displayName": "Test User"},
    }
