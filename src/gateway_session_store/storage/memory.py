"""Async in-memory session store.

Keeps encoded sessions in a plain Python set guarded by ``asyncio.Lock``.
All data is lost when the process exits.  This store is primarily useful
for tests and for prototyping against the remote stores.

Unlike the remote stores, ``update`` never replaces an existing entry: a
second write for an id that is already present is rejected with
``StoreError``.  Entries do not expire.

Classes
-------
- InMemoryStore  — set-backed ephemeral async store
"""
from __future__ import annotations

import asyncio
import logging
from typing import TypeVar

from gateway_session_store.codec import Codec
from gateway_session_store.errors import StoreError
from gateway_session_store.session import Session, SessionId
from gateway_session_store.storage.base import SessionStore

logger = logging.getLogger(__name__)

A = TypeVar("A")


class InMemoryStore(SessionStore):
    """Ephemeral async in-process store backed by a set of encoded sessions.

    An ``asyncio.Lock`` guards every access so that the membership check
    and the insert in ``update`` happen atomically with respect to other
    coroutines.

    The lock only serializes coroutines running on a single event loop.  It
    does not protect the store when it is shared between threads, or when
    it is used from more than one event loop (for example across separate
    ``asyncio.run`` calls) while another loop is waiting on it.
    """

    def __init__(self) -> None:
        self._sessions: set[Session[bytes]] = set()
        self._lock: asyncio.Lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # SessionStore interface
    # ------------------------------------------------------------------

    async def get(self, key: SessionId, codec: Codec[A]) -> Session[A] | None:
        """Return the session whose id equals ``key``, or ``None``."""
        async with self._lock:
            stored = self._find(key)
        if stored is None:
            logger.debug("InMemoryStore: miss for %s", key)
            return None
        return self._decode(key, stored.data, codec)

    async def update(self, session: Session[A], codec: Codec[A]) -> None:
        """Insert ``session`` in encoded form.

        Raises
        ------
        StoreError
            If a session with the same id is already stored.
        """
        encoded = session.map(codec.encode)
        async with self._lock:
            if self._find(session.id) is not None:
                raise StoreError(f"update failed with {session!r}", session)
            self._sessions.add(encoded)
        logger.debug("InMemoryStore: stored %s (%d bytes)", session.id, len(encoded.data))

    # ------------------------------------------------------------------
    # Extras
    # ------------------------------------------------------------------

    async def clear(self) -> None:
        """Remove all stored sessions."""
        async with self._lock:
            self._sessions.clear()

    def _find(self, key: SessionId) -> Session[bytes] | None:
        return next((s for s in self._sessions if s.id == key), None)

    def __contains__(self, key: object) -> bool:
        return any(s.id == key for s in self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __repr__(self) -> str:
        return f"InMemoryStore(sessions={len(self._sessions)})"


__all__ = ["InMemoryStore"]
