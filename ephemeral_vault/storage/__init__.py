"""Storage backends for sealed secrets."""
from urllib.parse import urlparse

from ..exceptions import ConfigurationError
from .abstract import AbstractStore
from .memory import MemoryStore
from .redis import RedisStore

__all__ = [
    "AbstractStore",
    "MemoryStore",
    "RedisStore",
    "store_from_url",
]

_REDIS_SCHEMES = ("redis", "rediss", "unix")


def store_from_url(url: str, **kwargs) -> AbstractStore:
    """Build a store from a connection URL.

    ``memory://`` gives a MemoryStore; ``redis://``, ``rediss://`` and
    ``unix://`` give a RedisStore. Extra keyword arguments go to the store.

    Raises:
        ConfigurationError: If the URL scheme is not supported.
    """
    scheme = urlparse(url).scheme.lower()
    if scheme == "memory":
        kwargs.pop("prefix", None)
        return MemoryStore(**kwargs)
    if scheme in _REDIS_SCHEMES:
        return RedisStore(url=url, **kwargs)
    raise ConfigurationError(f"Unsupported store URL scheme: {scheme!r}")
