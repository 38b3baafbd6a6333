"""Service layer exports."""

from .credentials import (
    CredentialLifecycleManager,
    CredentialState,
    MissingAuthCodeError,
    NotAuthenticatedError,
)
from .token_cipher import TokenCipherService, TokenDecryptionError

__all__ = [
    "CredentialLifecycleManager",
    "CredentialState",
    "MissingAuthCodeError",
    "NotAuthenticatedError",
    "TokenCipherService",
    "TokenDecryptionError",
]
