"""
AbstractStore — Contract for ciphertext persistence backends.

Stores opaque blobs addressed by identifier, with optional expiry.
Backends never see keys or plaintext.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Optional, TypeVar

from ..exceptions import StoreUnavailable

T = TypeVar("T")

DEFAULT_TIMEOUT = 4.0


class AbstractStore(ABC):
    """Key-value store for sealed secrets.

    Every operation is bounded by ``timeout`` seconds; a backend that does
    not answer in time is reported as ``StoreUnavailable``.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, **kwargs) -> None:
        if timeout <= 0:
            raise ValueError("Store timeout must be positive")
        self._timeout = timeout
        self.logger = logging.getLogger("ephemeral_vault.storage")

    async def __aenter__(self) -> "AbstractStore":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        """Prepare the backend (connect, ping). No-op by default."""

    async def close(self) -> None:
        """Release backend resources. No-op by default."""

    async def _bounded(self, op: str, aw: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(aw, timeout=self._timeout)
        except asyncio.TimeoutError as err:
            raise StoreUnavailable(
                f"{op} timed out after {self._timeout}s"
            ) from err

    @staticmethod
    def _check_ttl(ttl: float) -> None:
        if ttl < 0:
            raise ValueError("TTL cannot be negative")

    @abstractmethod
    async def put(self, identifier: str, blob: bytes, ttl: float = 0) -> None:
        """Store blob under identifier, overwriting any previous value.

        Args:
            identifier: Entry address.
            blob: Sealed payload.
            ttl: Seconds until the entry expires; 0 means never.

        Raises:
            StoreUnavailable: On backend failure.
        """

    @abstractmethod
    async def get(self, identifier: str) -> Optional[bytes]:
        """Return the stored blob, or None if unknown or expired.

        Raises:
            StoreUnavailable: On backend failure.
        """

    @abstractmethod
    async def delete(self, identifier: str) -> None:
        """Remove identifier if present; deleting an absent entry is fine.

        Raises:
            StoreUnavailable: On backend failure.
        """

    @abstractmethod
    async def compare_and_delete(self, identifier: str, blob: bytes) -> bool:
        """Atomically delete identifier only if it still holds blob.

        Of many concurrent callers passing the same blob, at most one
        gets True.

        Returns:
            True if this call removed the entry, False otherwise.

        Raises:
            StoreUnavailable: On backend failure.
        """
