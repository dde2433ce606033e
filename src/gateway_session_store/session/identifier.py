"""Session identifier model.

A ``SessionId`` wraps the opaque identifier bytes handed out by the
gateway together with the absolute instant at which the session expires.
Backends address entries through one of its representations:

- ``as_bytes``  — base64 text as ASCII bytes, for byte-keyed backends
- ``as_buffer`` — a ``memoryview`` over the same bytes, for buffer-keyed
  backends

Identity is defined by the identifier bytes alone: two ids with the same
bytes are equal even when they carry different expiration instants.

Classes
-------
- SessionId  — immutable identifier with expiration metadata
"""
from __future__ import annotations

import base64
import binascii
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, field_validator


class SessionId(BaseModel):
    """Immutable session identifier.

    Parameters
    ----------
    value:
        Raw identifier bytes.  Must not be empty.
    expires:
        Absolute expiration instant.  Naive datetimes are taken to be UTC.
    """

    value: bytes
    expires: datetime

    model_config = {"frozen": True}

    @field_validator("value")
    @classmethod
    def _non_empty(cls, value: bytes) -> bytes:
        if not value:
            raise ValueError("session id bytes must not be empty")
        return value

    @field_validator("expires")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_base64(cls, text: str, expires: datetime) -> SessionId:
        """Parse the textual form produced by ``as_base64``.

        Raises
        ------
        ValueError
            If ``text`` is not valid base64.
        """
        try:
            raw = base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise ValueError(f"Invalid session id {text!r}: {exc}") from exc
        return cls(value=raw, expires=expires)

    # ------------------------------------------------------------------
    # Representations
    # ------------------------------------------------------------------

    @property
    def raw(self) -> bytes:
        return self.value

    @property
    def as_base64(self) -> str:
        return base64.b64encode(self.value).decode("ascii")

    @property
    def as_bytes(self) -> bytes:
        """Generic byte representation used as a key by byte-oriented backends."""
        return self.as_base64.encode("ascii")

    @property
    def as_buffer(self) -> memoryview:
        """Buffer representation used as a key by buffer-oriented backends."""
        return memoryview(self.as_bytes)

    # ------------------------------------------------------------------
    # Expiration
    # ------------------------------------------------------------------

    def expires_in(self, now: datetime | None = None) -> timedelta:
        """Return the time remaining until ``expires`` (negative once past)."""
        current = now or datetime.now(timezone.utc)
        return self.expires - current

    def expired(self, now: datetime | None = None) -> bool:
        return self.expires_in(now) <= timedelta(0)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SessionId):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.as_base64

    def __repr__(self) -> str:
        return f"SessionId({self.as_base64!r}, expires={self.expires.isoformat()})"


__all__ = ["SessionId"]
