"""Shared fixtures for the vault test-suite."""
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis

from ephemeral_vault.service import SecretService
from ephemeral_vault.storage import MemoryStore, RedisStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    """Create a MemoryStore driven by the fake clock."""
    return MemoryStore(clock=clock)


@pytest.fixture
def service(memory_store):
    """Create a SecretService over the in-memory store."""
    return SecretService(memory_store)


@pytest_asyncio.fixture
async def fake_redis() -> AsyncIterator[FakeRedis]:
    client = FakeRedis(decode_responses=False)
    try:
        yield client
    finally:
        await client.aclose()


@pytest_asyncio.fixture
async def redis_store(fake_redis) -> AsyncIterator[RedisStore]:
    store = RedisStore(client=fake_redis)
    await store.open()
    try:
        yield store
    finally:
        await store.close()


@pytest_asyncio.fixture
async def offline_redis() -> AsyncIterator[FakeRedis]:
    """A redis client whose server refuses every command."""
    server = FakeServer()
    server.connected = False
    client = FakeRedis(server=server, decode_responses=False)
    try:
        yield client
    finally:
        await client.aclose()
