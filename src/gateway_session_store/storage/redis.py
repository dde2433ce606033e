"""Async Redis session store — requires redis[asyncio] (guarded import).

Sessions are stored as Redis strings under the id's buffer representation
and written with ``SETEX`` so that Redis expires them on its own.  The TTL
is the whole number of seconds left until the id expires; a session with no
whole second left is rejected with ``StoreError`` before Redis is contacted,
because ``SETEX`` refuses a non-positive expiry.

Redis speaks in buffers: keys and values are handed to the client as
``memoryview`` objects and replies may come back as ``bytes``, ``bytearray``,
``memoryview`` or, for clients created with ``decode_responses=True``,
``str``.  The translation to and from the codec's ``bytes`` happens only in
``_to_buffer`` and ``_from_buffer``.

Classes
-------
- RedisStore  — redis.asyncio-backed async session store
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

from gateway_session_store.codec import Codec
from gateway_session_store.errors import StoreError
from gateway_session_store.session import Session, SessionId
from gateway_session_store.storage.base import SessionStore

logger = logging.getLogger(__name__)

A = TypeVar("A")

_REDIS_IMPORT_ERROR = (
    "RedisStore requires the 'redis' package with asyncio support. "
    "Install it with: pip install redis  or  "
    "pip install 'gateway-session-store[redis]'"
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_buffer(data: bytes) -> memoryview:
    return memoryview(data)


def _from_buffer(reply: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(reply, str):
        return reply.encode("utf-8")
    return bytes(reply)


class RedisStore(SessionStore):
    """Persists sessions in Redis using a ``redis.asyncio`` client.

    Parameters
    ----------
    client:
        A ``redis.asyncio.Redis`` instance, or any object exposing
        coroutine ``get(name)`` and ``setex(name, time, value)`` methods.
    clock:
        Returns the current time as an aware datetime.  Used to turn the
        id's expiration instant into a TTL.
    """

    def __init__(
        self,
        client: Any,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._client = client
        self._clock = clock

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> RedisStore:
        """Build a store around ``redis.asyncio.Redis.from_url(url)``.

        Extra keyword arguments are passed to ``from_url``.
        """
        try:
            import redis.asyncio as redis_asyncio
        except ImportError as exc:
            raise ImportError(_REDIS_IMPORT_ERROR) from exc

        return cls(redis_asyncio.Redis.from_url(url, **kwargs))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ttl_seconds(self, session: Session[Any]) -> int:
        """Return whole seconds until ``session.id`` expires.

        Raises
        ------
        StoreError
            If less than one second remains.
        """
        remaining = session.id.expires_in(self._clock())
        seconds = int(remaining.total_seconds())
        if seconds <= 0:
            raise StoreError(
                f"update failed with {session!r}: less than one second left "
                f"before expiry ({remaining.total_seconds():.3f}s)",
                session,
            )
        return seconds

    # ------------------------------------------------------------------
    # SessionStore interface
    # ------------------------------------------------------------------

    async def get(self, key: SessionId, codec: Codec[A]) -> Session[A] | None:
        """Return the session stored under ``key``, or ``None``."""
        reply = await self._client.get(key.as_buffer)
        if reply is None:
            logger.debug("RedisStore: miss for %s", key)
            return None
        return self._decode(key, _from_buffer(reply), codec)

    async def update(self, session: Session[A], codec: Codec[A]) -> None:
        """Write ``session`` with ``SETEX``, replacing any previous value.

        Raises
        ------
        StoreError
            If the session has less than one second left before it expires.
        """
        ttl = self._ttl_seconds(session)
        payload = _to_buffer(codec.encode(session.data))
        await self._client.setex(session.id.as_buffer, ttl, payload)
        logger.debug("RedisStore: stored %s with ttl=%ds", session.id, ttl)

    async def close(self) -> None:
        """Close the underlying Redis connection pool."""
        await self._client.aclose()

    def __repr__(self) -> str:
        return f"RedisStore(client={self._client!r})"


__all__ = ["RedisStore"]
