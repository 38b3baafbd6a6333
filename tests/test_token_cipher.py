try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from google_oauth.services.token_cipher import TokenCipherService, TokenDecryptionError


def test_token_cipher_roundtrip() -> None:
    cipher = TokenCipherService(secret="super-secret-key")
    plaintext = "ya29.access-token"

    encrypted = cipher.encrypt(plaintext)
    assert encrypted != plaintext
    assert cipher.decrypt(encrypted) == plaintext


def test_token_cipher_rejects_ciphertext_from_another_key() -> None:
    encrypted = TokenCipherService(secret="old-secret").encrypt("refresh-token")

    with pytest.raises(TokenDecryptionError):
        TokenCipherService(secret="new-secret").decrypt(encrypted)


def test_from_secrets_uses_first_configured_secret() -> None:
    cipher = TokenCipherService.from_secrets(None, "", "fallback-secret")

    assert TokenCipherService(secret="fallback-secret").decrypt(cipher.encrypt("x")) == "x"

    with pytest.raises(ValueError):
        TokenCipherService.from_secrets(None, "")
