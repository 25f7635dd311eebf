"""
SecretService — Creation and retrieval of ephemeral secrets.

Provides the public API of the vault:
- ``create(message, ttl, one_time)`` — seal and persist, return a handle
- ``retrieve(identifier, key)`` — fetch, open, and consume if one-time

Security Note:
    The decryption key only ever passes through this object on its way to
    and from the caller: it is never stored nor logged. Retrieval failures
    that a caller could use to probe for secrets are all reported as
    ``NotFound``; the real reason is logged for operators.
"""
import secrets
import logging

from . import crypto
from .exceptions import (
    CipherError,
    CorruptSecret,
    DeletionFailed,
    InvalidInput,
    NotFound,
    PersistenceFailed,
    StoreUnavailable,
)
from .models import SecretHandle, SecretRecord
from .storage import AbstractStore

logger = logging.getLogger("ephemeral_vault.service")

IDENTIFIER_BYTES = 16  # 128-bit identifiers


def generate_identifier() -> str:
    """Return a fresh unguessable identifier (32 hex characters)."""
    return secrets.token_hex(IDENTIFIER_BYTES)


class SecretService:
    """Orchestrates the secret lifecycle over an injected store.

    The service keeps no state of its own; atomicity of one-time reads is
    delegated to ``AbstractStore.compare_and_delete``.
    """

    def __init__(self, store: AbstractStore) -> None:
        self._store = store

    @property
    def store(self) -> AbstractStore:
        return self._store

    async def create(
        self,
        message: str,
        ttl: float = 0,
        one_time: bool = False,
    ) -> SecretHandle:
        """Seal and persist a new secret.

        Args:
            message: Non-empty text to share.
            ttl: Seconds until the secret expires; 0 keeps it until deleted.
            one_time: Delete the secret after its first successful read.

        Returns:
            SecretHandle with the identifier and the decryption key.

        Raises:
            InvalidInput: If message is empty or ttl is negative.
            PersistenceFailed: If the store rejects the write.
        """
        if not isinstance(message, str) or not message:
            raise InvalidInput("Message cannot be empty", field="message")
        if ttl < 0:
            raise InvalidInput("TTL cannot be negative", field="ttl")

        identifier = generate_identifier()
        key = crypto.generate_key()
        record = SecretRecord(message=message, one_time=one_time)
        sealed = crypto.encrypt(crypto.serialize_record(record), key)

        try:
            await self._store.put(identifier, sealed, ttl)
        except StoreUnavailable as err:
            logger.error(
                "Failed to persist secret id=%s: %s", identifier, err,
            )
            raise PersistenceFailed("could not persist secret") from err

        logger.debug(
            "Secret created: id=%s ttl=%s one_time=%s",
            identifier, ttl, one_time,
        )
        return SecretHandle(identifier=identifier, key=key)

    async def retrieve(self, identifier: str, key: str) -> str:
        """Open a secret and return its message.

        One-time secrets are deleted before the message is returned; if
        deletion cannot be confirmed the message is withheld.

        Raises:
            NotFound: Unknown, expired, consumed, or wrong/malformed key.
            StoreUnavailable: If the store cannot be read.
            CorruptSecret: If the decrypted payload is not a record.
            DeletionFailed: If a one-time secret could not be deleted.
        """
        sealed = await self._store.get(identifier)
        if sealed is None:
            logger.info("Secret not found in storage: id=%s", identifier)
            raise NotFound("Secret not found")

        try:
            plaintext = crypto.decrypt(sealed, key)
        except CipherError as err:
            logger.warning(
                "Failed to open secret id=%s: %s", identifier,
                type(err).__name__,
            )
            raise NotFound("Secret not found") from None

        try:
            record = crypto.deserialize_record(plaintext)
        except CorruptSecret:
            logger.error("Corrupt secret record: id=%s", identifier)
            raise

        if record.one_time:
            try:
                consumed = await self._store.compare_and_delete(
                    identifier, sealed,
                )
            except StoreUnavailable as err:
                logger.error(
                    "Failed to delete one-time secret id=%s: %s",
                    identifier, err,
                )
                raise DeletionFailed(
                    "could not delete one-time secret"
                ) from err
            if not consumed:
                logger.info(
                    "One-time secret already consumed: id=%s", identifier,
                )
                raise NotFound("Secret not found")
            logger.debug("One-time secret consumed: id=%s", identifier)

        return record.message
