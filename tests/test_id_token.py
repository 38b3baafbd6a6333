try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import base64
import json

import pytest

from google_oauth.clients.id_token import IdentityTokenDecoder, MalformedTokenError


def _segment(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def test_decode_reads_subject_and_email_without_verifying(id_token_factory) -> None:
    token = id_token_factory(exp=1)  # long expired and signed with an unknown key

    claims = IdentityTokenDecoder().decode(token)

    assert claims.subject_id == "103117966615020283234"
    assert claims.email == "user@gmail.com"


def test_decode_allows_missing_email(id_token_factory) -> None:
    claims = IdentityTokenDecoder().decode(id_token_factory(email=None))

    assert claims.email is None


def test_decode_rejects_token_without_subject(id_token_factory) -> None:
    with pytest.raises(MalformedTokenError):
        IdentityTokenDecoder().decode(id_token_factory(sub=None))


@pytest.mark.parametrize(
    "token",
    [
        "",
        "not-a-jwt",
        ".".join([_segment(b'{"alg":"none"}'), _segment(b"not json"), ""]),
        ".".join([_segment(b'{"alg":"none"}'), _segment(json.dumps(["sub"]).encode()), ""]),
    ],
)
def test_decode_rejects_undecodable_payloads(token: str) -> None:
    with pytest.raises(MalformedTokenError):
        IdentityTokenDecoder().decode(token)


class StubVerifier:
    def __init__(self, claims=None, error: Exception | None = None) -> None:
        self.claims = claims
        self.error = error
        self.tokens: list[str] = []

    def verify(self, id_token: str) -> dict:
        self.tokens.append(id_token)
        if self.error is not None:
            raise self.error
        return self.claims


def test_decode_delegates_to_configured_verifier() -> None:
    verifier = StubVerifier(claims={"sub": "verified-subject", "email": "v@example.com"})

    claims = IdentityTokenDecoder(verifier=verifier).decode("opaque.jwt.value")

    assert verifier.tokens == ["opaque.jwt.value"]
    assert claims.subject_id == "verified-subject"


def test_decode_propagates_verification_failure() -> None:
    verifier = StubVerifier(error=MalformedTokenError("bad signature"))

    with pytest.raises(MalformedTokenError, match="bad signature"):
        IdentityTokenDecoder(verifier=verifier).decode("opaque.jwt.value")
