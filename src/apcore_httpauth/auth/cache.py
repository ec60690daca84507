"""In-memory cache of verified Basic credentials."""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Callable

from apcore import Identity
from cachetools import Cache, LRUCache, TTLCache

from apcore_httpauth.auth.protocol import CredentialCache

logger = logging.getLogger(__name__)

DEFAULT_MAXSIZE = 1024


def credential_cache_key(username: str, password: str) -> str:
    """Derive the cache key for a username/password pair.

    The pair is hashed so the cache never holds a plaintext password.
    """
    return hashlib.sha256(f"{username}:{password}".encode()).hexdigest()


class LRUCredentialCache:
    """Bounded cache of verified Basic credentials.

    Uses ``cachetools.LRUCache``, or ``cachetools.TTLCache`` when ``ttl`` is
    given. Entries are only valid for the lifetime of the process. Access is
    expected from a single event loop.

    Args:
        maxsize: Maximum number of cached credentials.
        ttl: Optional lifetime of an entry in seconds.
        timer: Clock used to expire entries when ``ttl`` is set.
    """

    def __init__(
        self,
        maxsize: int = DEFAULT_MAXSIZE,
        ttl: float | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        if ttl is not None and ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._cache: Cache[str, Identity]
        if ttl is None:
            self._cache = LRUCache(maxsize=maxsize)
        else:
            self._cache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        logger.debug("Initialized LRUCredentialCache with maxsize=%s, ttl=%s", maxsize, ttl)

    def get(self, key: str) -> Identity | None:
        return self._cache.get(key)

    def set(self, key: str, identity: Identity) -> None:
        self._cache[key] = identity

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


# Verify protocol compliance at import time
assert isinstance(LRUCredentialCache.__new__(LRUCredentialCache), CredentialCache)
