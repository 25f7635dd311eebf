"""Ephemeral Vault — One-shot and time-limited secret sharing.

Security Note (Threat Model):
    The server only ever holds ciphertext. Each secret is sealed with its
    own random key, which is returned to the creator and never stored.
    Plaintext exists in process memory only while a request is served.
"""

from .version import __version__
from .models import SecretRecord, SecretHandle
from .service import SecretService
from .storage import AbstractStore, MemoryStore, RedisStore, store_from_url
from .config import VaultConfig
from .exceptions import (
    VaultError,
    InvalidInput,
    NotFound,
    StoreUnavailable,
    PersistenceFailed,
    CorruptSecret,
    DeletionFailed,
)

__all__ = [
    "__version__",
    "SecretRecord",
    "SecretHandle",
    "SecretService",
    "AbstractStore",
    "MemoryStore",
    "RedisStore",
    "store_from_url",
    "VaultConfig",
    "VaultError",
    "InvalidInput",
    "NotFound",
    "StoreUnavailable",
    "PersistenceFailed",
    "CorruptSecret",
    "DeletionFailed",
]
