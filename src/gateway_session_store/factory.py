"""Build a session store from a ``StoreConfig``."""
from __future__ import annotations

import logging
from typing import Any

from gateway_session_store.config import StoreConfig
from gateway_session_store.storage.base import SessionStore
from gateway_session_store.storage.memcached import MemcachedStore
from gateway_session_store.storage.memory import InMemoryStore
from gateway_session_store.storage.redis import RedisStore

logger = logging.getLogger(__name__)


def create_store(config: StoreConfig) -> SessionStore:
    """Instantiate the store described by ``config``.

    Client connections are opened lazily by the client libraries, so this
    performs no I/O.

    Raises
    ------
    ImportError
        If the client library for the chosen backend is not installed.
    """
    if config.backend == "memcached":
        host, port = config.address()
        logger.debug("create_store: memcached at %s:%d", host, port)
        return MemcachedStore.from_address(host, port, pool_size=config.pool_size)
    if config.backend == "redis":
        kwargs: dict[str, Any] = {}
        if config.connect_timeout is not None:
            kwargs["socket_connect_timeout"] = config.connect_timeout
        host, port = config.address()
        logger.debug("create_store: redis at %s:%d", host, port)
        return RedisStore.from_url(config.redis_url(), **kwargs)
    logger.debug("create_store: in-memory store")
    return InMemoryStore()


__all__ = ["create_store"]
