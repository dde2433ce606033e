"""Session store subpackage.

All stores implement the ``SessionStore`` ABC.  The Redis and memcached
stores import their client libraries only when they build a client
themselves (``RedisStore.from_url``, ``MemcachedStore.from_address``), so
the package remains importable without those extras.

Public surface
--------------
- SessionStore    — abstract base class
- InMemoryStore   — set-backed store for tests and prototyping
- MemcachedStore  — memcached store (client: ``aiomcache``)
- RedisStore      — Redis store (client: ``redis.asyncio``)
"""
from __future__ import annotations

from gateway_session_store.storage.base import SessionStore
from gateway_session_store.storage.memcached import MemcachedStore
from gateway_session_store.storage.memory import InMemoryStore
from gateway_session_store.storage.redis import RedisStore

__all__ = [
    "InMemoryStore",
    "MemcachedStore",
    "RedisStore",
    "SessionStore",
]
