#!/usr/bin/env python3
"""Example: Storage Backends

Runs the same write/read cycle against every backend that is reachable.
Configure the remote backends with environment variables:

    REDIS_URL     (default redis://localhost:6379/0)
    MEMCACHED_URL (default memcached://localhost:11211)

Usage:
    python examples/02_storage_backends.py

Requirements:
    pip install 'gateway-session-store[all]'
"""
from __future__ import annotations

import asyncio
import os
import secrets
from datetime import datetime, timedelta, timezone

from gateway_session_store import (
    JsonCodec,
    Session,
    SessionId,
    SessionStoreError,
    StoreConfig,
    create_store,
)

CONFIGS = [
    StoreConfig(backend="memory"),
    StoreConfig(
        backend="memcached",
        url=os.environ.get("MEMCACHED_URL", "memcached://localhost:11211"),
    ),
    StoreConfig(
        backend="redis",
        url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
    ),
]


async def demo_backend(config: StoreConfig) -> None:
    sid = SessionId(
        value=secrets.token_bytes(16),
        expires=datetime.now(timezone.utc) + timedelta(minutes=5),
    )
    codec = JsonCodec()
    async with create_store(config) as store:
        await store.update(Session(sid, {"uri": "/home", "attempt": 1}), codec)
        session = await store.get(sid, codec)
        print(f"  [{config.backend}] {store!r}: read back {session.data if session else None}")

        try:
            await store.update(Session(sid, {"uri": "/home", "attempt": 2}), codec)
            print(f"  [{config.backend}] second write replaced the first")
        except SessionStoreError as exc:
            print(f"  [{config.backend}] second write rejected: {exc}")


async def main() -> None:
    for config in CONFIGS:
        try:
            await demo_backend(config)
        except (ImportError, OSError) as exc:
            print(f"  [{config.backend}] unavailable: {exc}")


if __name__ == "__main__":
    asyncio.run(main())
