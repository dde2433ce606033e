#!/usr/bin/env python3
"""Example: Quickstart — gateway-session-store

Minimal working example: store the request a user was trying to reach
before being sent to log in, then read it back after authentication.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install gateway-session-store
"""
from __future__ import annotations

import asyncio
import secrets
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel

import gateway_session_store
from gateway_session_store import InMemoryStore, ModelCodec, Session, SessionId


class PendingRequest(BaseModel):
    method: str
    uri: str


async def main() -> None:
    print(f"gateway-session-store version: {gateway_session_store.__version__}")

    store = InMemoryStore()
    codec = ModelCodec(PendingRequest)

    # Step 1: the gateway mints an id and remembers where the user was going
    sid = SessionId(
        value=secrets.token_bytes(16),
        expires=datetime.now(timezone.utc) + timedelta(minutes=15),
    )
    await store.update(Session(sid, PendingRequest(method="GET", uri="/reports")), codec)
    print(f"Stored session {sid}")

    # Step 2: after login, the original request is recovered
    session = await store.get(sid, codec)
    assert session is not None
    print(f"Redirecting to {session.data.method} {session.data.uri}")

    # Step 3: unknown ids are simply absent
    stranger = SessionId(value=b"unknown", expires=sid.expires)
    print(f"Unknown id -> {await store.get(stranger, codec)}")


if __name__ == "__main__":
    asyncio.run(main())
