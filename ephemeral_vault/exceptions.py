"""
Vault Errors — Failure taxonomy for the secret lifecycle.

Retrieval failures that could help an attacker tell classes of problems
apart (unknown identifier, expired, consumed, wrong key) all surface as
``NotFound``. The finer-grained cipher errors stay internal.
"""
from typing import Optional


class VaultError(Exception):
    """Base class for every error raised by the vault."""


class ConfigurationError(VaultError):
    """Invalid or unsupported configuration value."""


class InvalidInput(VaultError, ValueError):
    """Caller supplied an invalid value; safe to report with detail."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class NotFound(VaultError):
    """Secret is unknown, expired, already consumed or the key is wrong."""


class StoreUnavailable(VaultError):
    """The storage backend could not be reached or timed out."""


class PersistenceFailed(VaultError):
    """A new secret could not be persisted."""


class CorruptSecret(VaultError):
    """Decrypted payload is not a valid secret record."""


class DeletionFailed(VaultError):
    """A one-time secret could not be guaranteed deleted after reading."""


class CipherError(VaultError):
    """Base class for encryption/decryption failures."""


class InvalidKeyFormat(CipherError):
    """Key is not hex or does not decode to the required length."""


class Truncated(CipherError):
    """Sealed payload is shorter than a nonce."""


class AuthenticationFailed(CipherError):
    """Authentication tag did not verify (wrong key, corruption, tampering)."""
