"""
RedisStore — Sealed secrets kept in Redis with native expiry.

Entries live under ``{prefix}{identifier}``. One-time consumption relies on
WATCH/MULTI/EXEC so that only one reader can delete a given entry.
"""
from collections.abc import Awaitable
from typing import Optional, TypeVar

from redis import asyncio as aioredis
from redis.exceptions import RedisError, WatchError

from ..exceptions import StoreUnavailable
from .abstract import AbstractStore

T = TypeVar("T")

DEFAULT_PREFIX = "secret:"


class RedisStore(AbstractStore):
    """Store backed by a ``redis.asyncio`` client.

    Args:
        url: Redis connection URL, used when ``client`` is not given.
        client: Existing async client (must not decode responses).
        prefix: Namespace prepended to every identifier.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        client: Optional[aioredis.Redis] = None,
        prefix: str = DEFAULT_PREFIX,
        **kwargs
    ) -> None:
        super().__init__(**kwargs)
        if client is None and url is None:
            raise ValueError("RedisStore needs either a url or a client")
        self._owned = client is None
        self._redis = client or aioredis.from_url(
            url,
            decode_responses=False,
            socket_timeout=self._timeout,
            socket_connect_timeout=self._timeout,
        )
        self._prefix = prefix

    def _key(self, identifier: str) -> str:
        return f"{self._prefix}{identifier}"

    async def _call(self, op: str, aw: Awaitable[T]) -> T:
        try:
            return await self._bounded(op, aw)
        except (RedisError, OSError) as err:
            raise StoreUnavailable(
                f"redis {op} failed: {type(err).__name__}"
            ) from err

    async def open(self) -> None:
        await self._call("ping", self._redis.ping())
        self.logger.debug("Connected to redis store")

    async def close(self) -> None:
        if self._owned:
            await self._redis.aclose()

    async def put(self, identifier: str, blob: bytes, ttl: float = 0) -> None:
        self._check_ttl(ttl)
        if ttl > 0:
            # PX keeps sub-second TTLs instead of rounding them to zero
            aw = self._redis.set(
                self._key(identifier), blob, px=max(1, int(ttl * 1000))
            )
        else:
            aw = self._redis.set(self._key(identifier), blob)
        await self._call("set", aw)

    async def get(self, identifier: str) -> Optional[bytes]:
        return await self._call("get", self._redis.get(self._key(identifier)))

    async def delete(self, identifier: str) -> None:
        await self._call("delete", self._redis.delete(self._key(identifier)))

    async def compare_and_delete(self, identifier: str, blob: bytes) -> bool:
        return await self._call(
            "compare_and_delete", self._compare_and_delete(identifier, blob)
        )

    async def _compare_and_delete(self, identifier: str, blob: bytes) -> bool:
        key = self._key(identifier)
        async with self._redis.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(key)
                current = await pipe.get(key)
                if current != blob:
                    await pipe.unwatch()
                    return False
                pipe.multi()
                pipe.delete(key)
                deleted, = await pipe.execute()
            except WatchError:
                # another client touched the entry between GET and EXEC
                return False
        return bool(deleted)
