"""
Vault Crypto Core — Key generation, encryption/decryption, and serialization.

Every secret is sealed with its own random AES-128 key:
- Key: 16 random bytes, handed to the owner as 32 hex characters.
- Payload: AES-GCM → [nonce 12B][encrypted_payload + GCM_tag 16B]

Security Note:
    Never log keys, plaintext or ciphertext values.
    Nonces are random 96-bit, generated here for every call;
    callers cannot supply their own.
"""
import os
import re
import secrets
import logging

import orjson
from pydantic import ValidationError
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import (
    AuthenticationFailed,
    CorruptSecret,
    InvalidKeyFormat,
    Truncated,
)
from .models import SecretRecord

logger = logging.getLogger("ephemeral_vault.crypto")

NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16  # GCM tag
KEY_LENGTH = 16  # AES-128

_HEX_KEY_PATTERN = re.compile(r"[0-9a-fA-F]{%d}" % (KEY_LENGTH * 2))


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

def generate_key() -> str:
    """Generate a fresh random key for a single secret.

    Returns:
        32-character lowercase hex string (128 bits).
    """
    return secrets.token_hex(KEY_LENGTH)


def decode_key(key: str) -> bytes:
    """Decode a hex key into raw key bytes.

    Raises:
        InvalidKeyFormat: If key is not a hex string of the required length.
    """
    if not isinstance(key, str) or not _HEX_KEY_PATTERN.fullmatch(key):
        raise InvalidKeyFormat(
            f"key must be {KEY_LENGTH * 2} hexadecimal characters"
        )
    return bytes.fromhex(key)


# ---------------------------------------------------------------------------
# Sealing
# ---------------------------------------------------------------------------

def encrypt(plaintext: bytes, key: str) -> bytes:
    """Encrypt plaintext under a hex key.

    Format: [nonce 12B][encrypted_payload + GCM_tag 16B]

    Args:
        plaintext: Data to encrypt.
        key: Hex-encoded 128-bit key.

    Returns:
        Sealed bytes.

    Raises:
        InvalidKeyFormat: If the key cannot be decoded.
    """
    cipher = AESGCM(decode_key(key))
    nonce = os.urandom(NONCE_SIZE)
    ct = cipher.encrypt(nonce, plaintext, None)
    return nonce + ct


def decrypt(sealed: bytes, key: str) -> bytes:
    """Verify and decrypt a sealed payload.

    Args:
        sealed: Ciphertext in format [nonce 12B][payload+tag].
        key: Hex-encoded 128-bit key.

    Returns:
        Decrypted plaintext bytes.

    Raises:
        InvalidKeyFormat: If the key cannot be decoded.
        Truncated: If sealed is shorter than a nonce.
        AuthenticationFailed: If the tag does not verify.
    """
    key_bytes = decode_key(key)
    if len(sealed) < NONCE_SIZE:
        raise Truncated(
            f"sealed payload too short: {len(sealed)} bytes "
            f"(minimum {NONCE_SIZE})"
        )
    cipher = AESGCM(key_bytes)
    nonce = sealed[:NONCE_SIZE]
    ct = sealed[NONCE_SIZE:]
    try:
        return cipher.decrypt(nonce, ct, None)
    except InvalidTag as err:
        # wrong key, corrupted or tampered data: deliberately one error
        raise AuthenticationFailed("could not authenticate payload") from err


# ---------------------------------------------------------------------------
# Record serialization
# ---------------------------------------------------------------------------

def serialize_record(record: SecretRecord) -> bytes:
    """Serialize a SecretRecord to orjson bytes."""
    return orjson.dumps(record.model_dump())


def deserialize_record(data: bytes) -> SecretRecord:
    """Rebuild a SecretRecord from decrypted bytes.

    Raises:
        CorruptSecret: If data is not a valid serialized record.
    """
    try:
        return SecretRecord.model_validate(orjson.loads(data))
    except (orjson.JSONDecodeError, ValidationError) as err:
        raise CorruptSecret(
            f"invalid secret record: {type(err).__name__}"
        ) from err
