"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

from datetime import datetime, timedelta, timezone

import jwt
import pytest

ID_TOKEN_KEY = "test-signing-key-that-is-long-enough-for-hs256"


def make_id_token(**claims) -> str:
    """Build an id_token the way Google shapes its payload."""
    payload = {
        "iss": "accounts.google.com",
        "sub": "103117966615020283234",
        "email": "user@gmail.com",
        "aud": "test-client-id",
    }
    payload.update(claims)
    payload = {key: value for key, value in payload.items() if value is not None}
    return jwt.encode(payload, ID_TOKEN_KEY, algorithm="HS256")


class FakeClock:
    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2025, 4, 10, 18, 39, 48, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def id_token_factory():
    return make_id_token
