"""In-process store, useful for development and tests."""
import asyncio
import time
from collections.abc import Callable
from typing import Optional

from .abstract import AbstractStore


class MemoryStore(AbstractStore):
    """Dictionary-backed store with lazy expiry.

    Expired entries are dropped when they are next touched; there is no
    background sweeper.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        **kwargs
    ) -> None:
        super().__init__(**kwargs)
        self._clock = clock
        self._entries: dict[str, tuple[bytes, Optional[float]]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _live(self, identifier: str) -> Optional[bytes]:
        entry = self._entries.get(identifier)
        if entry is None:
            return None
        blob, deadline = entry
        if deadline is not None and self._clock() >= deadline:
            del self._entries[identifier]
            return None
        return blob

    async def put(self, identifier: str, blob: bytes, ttl: float = 0) -> None:
        self._check_ttl(ttl)
        deadline = self._clock() + ttl if ttl > 0 else None
        async with self._lock:
            self._entries[identifier] = (bytes(blob), deadline)

    async def get(self, identifier: str) -> Optional[bytes]:
        return self._live(identifier)

    async def delete(self, identifier: str) -> None:
        async with self._lock:
            self._entries.pop(identifier, None)

    async def compare_and_delete(self, identifier: str, blob: bytes) -> bool:
        async with self._lock:
            if self._live(identifier) != blob:
                return False
            del self._entries[identifier]
            return True

    async def close(self) -> None:
        self._entries.clear()
