"""Async memcached session store — requires aiomcache (guarded import).

Sessions are stored under the id's byte representation (base64 text, which
satisfies memcached's key grammar).  The protocol's ``flags`` field carries
no meaning here and is left at the client default of ``0``.

Memcached reads an expiration time of up to 30 days as a number of seconds
from now and anything larger as an absolute unix timestamp.  The store
follows that convention when converting the id's expiration instant.
Sessions that have already expired are rejected with ``StoreError``, since
memcached would store them and immediately treat them as absent.

Classes
-------
- MemcachedStore  — aiomcache-backed async session store
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, TypeVar

from gateway_session_store.codec import Codec
from gateway_session_store.errors import StoreError
from gateway_session_store.session import Session, SessionId
from gateway_session_store.storage.base import SessionStore

logger = logging.getLogger(__name__)

A = TypeVar("A")

_AIOMCACHE_IMPORT_ERROR = (
    "MemcachedStore requires the 'aiomcache' package. "
    "Install it with: pip install aiomcache  or  "
    "pip install 'gateway-session-store[memcached]'"
)

# Longest expiration memcached interprets as relative to now.
RELATIVE_EXPTIME_LIMIT = timedelta(days=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def memcached_exptime(expires: datetime, now: datetime) -> int:
    """Convert an absolute expiration instant to a memcached ``exptime``.

    Returns the remaining seconds, rounded up, when they fit in the relative
    window and the unix timestamp of ``expires`` otherwise.  Returns ``0``
    or less when ``expires`` is not in the future.
    """
    remaining = expires - now
    if remaining <= timedelta(0):
        return 0
    if remaining <= RELATIVE_EXPTIME_LIMIT:
        return math.ceil(remaining.total_seconds())
    return int(expires.timestamp())


class MemcachedStore(SessionStore):
    """Persists sessions in memcached using an ``aiomcache.Client``.

    Parameters
    ----------
    client:
        An ``aiomcache.Client`` instance, or any object exposing coroutine
        ``get(key)`` and ``set(key, value, exptime=...)`` methods.
    clock:
        Returns the current time as an aware datetime.
    """

    def __init__(
        self,
        client: Any,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._client = client
        self._clock = clock

    @classmethod
    def from_address(
        cls,
        host: str = "localhost",
        port: int = 11211,
        pool_size: int = 2,
    ) -> MemcachedStore:
        """Build a store around a new ``aiomcache.Client``."""
        try:
            import aiomcache
        except ImportError as exc:
            raise ImportError(_AIOMCACHE_IMPORT_ERROR) from exc

        return cls(aiomcache.Client(host, port, pool_size=pool_size))

    # ------------------------------------------------------------------
    # SessionStore interface
    # ------------------------------------------------------------------

    async def get(self, key: SessionId, codec: Codec[A]) -> Session[A] | None:
        """Return the session stored under ``key``, or ``None``."""
        raw = await self._client.get(key.as_bytes)
        if raw is None:
            logger.debug("MemcachedStore: miss for %s", key)
            return None
        return self._decode(key, raw, codec)

    async def update(self, session: Session[A], codec: Codec[A]) -> None:
        """Write ``session`` with ``set``, replacing any previous value.

        Unlike the general ``SessionStore.update`` rule, where a write fails
        only when backend I/O fails, a session whose id has already expired
        is rejected here before memcached is contacted.  Memcached reads an
        exptime of 0 as "never expire", so sending it would keep a dead
        session alive.

        Raises
        ------
        StoreError
            If the session has already expired or memcached did not store
            the value.
        """
        exptime = memcached_exptime(session.id.expires, self._clock())
        if exptime <= 0:
            raise StoreError(f"update failed with {session!r}: session already expired", session)
        stored = await self._client.set(
            session.id.as_bytes, codec.encode(session.data), exptime=exptime
        )
        if not stored:
            raise StoreError(f"update failed with {session!r}: value not stored", session)
        logger.debug("MemcachedStore: stored %s with exptime=%d", session.id, exptime)

    async def close(self) -> None:
        """Close all pooled memcached connections."""
        await self._client.close()

    def __repr__(self) -> str:
        return f"MemcachedStore(client={self._client!r})"


__all__ = ["MemcachedStore", "memcached_exptime"]
