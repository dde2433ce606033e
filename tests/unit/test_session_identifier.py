"""Unit tests for gateway_session_store.session (SessionId and Session)."""
from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from gateway_session_store.session import Session, SessionId

EXPIRES = datetime(2026, 3, 1, 13, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestSessionIdConstruction:
    def test_empty_value_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SessionId(value=b"", expires=EXPIRES)

    def test_naive_expires_treated_as_utc(self) -> None:
        sid = SessionId(value=b"abc", expires=datetime(2026, 3, 1, 13, 0, 0))
        assert sid.expires == EXPIRES
        assert sid.expires.tzinfo is not None

    def test_is_frozen(self) -> None:
        sid = SessionId(value=b"abc", expires=EXPIRES)
        with pytest.raises(ValidationError):
            sid.value = b"other"  # type: ignore[misc]

    def test_from_base64_roundtrip(self) -> None:
        sid = SessionId(value=b"\x00\xffbinary", expires=EXPIRES)
        parsed = SessionId.from_base64(sid.as_base64, EXPIRES)
        assert parsed.raw == b"\x00\xffbinary"

    def test_from_base64_rejects_garbage(self) -> None:
        with pytest.raises(ValueError, match="Invalid session id"):
            SessionId.from_base64("not base64!!", EXPIRES)


# ---------------------------------------------------------------------------
# Representations
# ---------------------------------------------------------------------------


class TestSessionIdRepresentations:
    def test_as_base64(self) -> None:
        sid = SessionId(value=b"session-1", expires=EXPIRES)
        assert sid.as_base64 == base64.b64encode(b"session-1").decode("ascii")

    def test_as_bytes_is_ascii_base64(self) -> None:
        sid = SessionId(value=b"session-1", expires=EXPIRES)
        assert sid.as_bytes == sid.as_base64.encode("ascii")

    def test_as_buffer_matches_bytes(self) -> None:
        sid = SessionId(value=b"session-1", expires=EXPIRES)
        buffer = sid.as_buffer
        assert isinstance(buffer, memoryview)
        assert buffer.tobytes() == sid.as_bytes

    def test_str_is_base64(self) -> None:
        sid = SessionId(value=b"session-1", expires=EXPIRES)
        assert str(sid) == sid.as_base64


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class TestSessionIdIdentity:
    def test_equal_when_bytes_equal(self) -> None:
        a = SessionId(value=b"same", expires=EXPIRES)
        b = SessionId(value=b"same", expires=EXPIRES + timedelta(days=1))
        assert a == b
        assert hash(a) == hash(b)

    def test_not_equal_when_bytes_differ(self) -> None:
        assert SessionId(value=b"a", expires=EXPIRES) != SessionId(value=b"b", expires=EXPIRES)

    def test_not_equal_to_other_types(self) -> None:
        assert SessionId(value=b"a", expires=EXPIRES) != b"a"


# ---------------------------------------------------------------------------
# Expiration
# ---------------------------------------------------------------------------


class TestSessionIdExpiration:
    def test_expires_in(self) -> None:
        sid = SessionId(value=b"a", expires=EXPIRES)
        now = EXPIRES - timedelta(minutes=5)
        assert sid.expires_in(now) == timedelta(minutes=5)

    def test_expires_in_negative_after_expiry(self) -> None:
        sid = SessionId(value=b"a", expires=EXPIRES)
        assert sid.expires_in(EXPIRES + timedelta(seconds=1)) < timedelta(0)

    def test_expired(self) -> None:
        sid = SessionId(value=b"a", expires=EXPIRES)
        assert sid.expired(EXPIRES) is True
        assert sid.expired(EXPIRES - timedelta(seconds=1)) is False


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class TestSession:
    def test_map_keeps_id(self) -> None:
        sid = SessionId(value=b"a", expires=EXPIRES)
        mapped = Session(sid, "payload").map(str.encode)
        assert mapped.id is sid
        assert mapped.data == b"payload"

    def test_equality_covers_data(self) -> None:
        sid = SessionId(value=b"a", expires=EXPIRES)
        assert Session(sid, "x") == Session(sid, "x")
        assert Session(sid, "x") != Session(sid, "y")

    def test_hashable_with_hashable_data(self) -> None:
        sid = SessionId(value=b"a", expires=EXPIRES)
        assert len({Session(sid, b"x"), Session(sid, b"x")}) == 1
