"""Shared fixtures: session ids, a fixed clock and dict-backed client fakes.

The fakes mirror the small slice of the ``redis.asyncio`` and ``aiomcache``
client APIs that the stores use, so no server is required.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from gateway_session_store.session import SessionId

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeRedis:
    """Dict-backed stand-in for ``redis.asyncio.Redis``."""

    def __init__(self) -> None:
        self.data: dict[bytes, bytes] = {}
        self.setex_calls: list[tuple[bytes, int, bytes]] = []
        self.closed = False

    async def get(self, name: Any) -> bytes | None:
        return self.data.get(bytes(name))

    async def setex(self, name: Any, time: int, value: Any) -> bool:
        self.setex_calls.append((bytes(name), time, bytes(value)))
        self.data[bytes(name)] = bytes(value)
        return True

    async def aclose(self) -> None:
        self.closed = True


class FakeMemcached:
    """Dict-backed stand-in for ``aiomcache.Client``."""

    def __init__(self) -> None:
        self.data: dict[bytes, bytes] = {}
        self.set_calls: list[tuple[bytes, bytes, int]] = []
        self.closed = False

    async def get(self, key: bytes, default: Any = None) -> bytes | None:
        return self.data.get(key, default)

    async def set(self, key: bytes, value: bytes, exptime: int = 0) -> bool:
        self.set_calls.append((key, value, exptime))
        self.data[key] = value
        return True

    async def close(self) -> None:
        self.closed = True


def _make_id(value: bytes = b"session-1", lifetime: timedelta = timedelta(hours=1)) -> SessionId:
    return SessionId(value=value, expires=NOW + lifetime)


@pytest.fixture()
def clock() -> Any:
    return lambda: NOW


@pytest.fixture()
def session_id() -> SessionId:
    return _make_id()


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def fake_memcached() -> FakeMemcached:
    return FakeMemcached()


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def make_id() -> Any:
    """Return a factory building ids that expire relative to ``NOW``."""
    return _make_id
