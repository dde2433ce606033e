"""Abstract base class for async session stores.

All concrete stores implement the two coroutines defined here.  Payloads
cross the store boundary as typed values; the supplied ``Codec`` turns them
into the bytes the backend keeps.

Behaviour shared by every backend:

- ``get`` returns ``None`` for a missing key and never raises for it.
- ``get`` raises ``DecodeError`` when stored bytes cannot be decoded, and
  lets backend client errors propagate unchanged.
- ``update`` raises only when the backend write fails or is rejected.

Classes
-------
- SessionStore  — abstract base for all stores
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import TypeVar

from gateway_session_store.codec import Codec
from gateway_session_store.errors import DecodeError
from gateway_session_store.session import Session, SessionId

logger = logging.getLogger(__name__)

A = TypeVar("A")


class SessionStore(ABC):
    """Protocol for async reading and writing of typed sessions.

    All methods are coroutines (``async def``), so every failure is
    delivered when the returned awaitable is awaited.
    """

    @abstractmethod
    async def get(self, key: SessionId, codec: Codec[A]) -> Session[A] | None:
        """Return the session stored under ``key``, or ``None`` if absent.

        Parameters
        ----------
        key:
            The session identifier to look up.  The returned session carries
            this very object as its ``id``.
        codec:
            Decodes the stored bytes into the payload type.

        Returns
        -------
        Session[A] | None
            The decoded session, or ``None`` when nothing is stored.

        Raises
        ------
        DecodeError
            If the stored bytes cannot be decoded by ``codec``.
        """

    @abstractmethod
    async def update(self, session: Session[A], codec: Codec[A]) -> None:
        """Persist ``session`` with its id's expiration applied as a TTL.

        Parameters
        ----------
        session:
            The session to write.
        codec:
            Encodes ``session.data`` to bytes.

        Raises
        ------
        StoreError
            If the backend rejected the write.
        """

    async def close(self) -> None:
        """Release resources held by the store.  No-op by default."""

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _decode(self, key: SessionId, raw: bytes, codec: Codec[A]) -> Session[A]:
        """Decode ``raw`` into a session addressed by the caller's ``key``.

        Third-party codecs that signal failure with ``ValueError`` or
        ``TypeError`` instead of ``DecodeError`` are wrapped, as is a
        ``RecursionError`` raised while parsing deeply nested input.
        """
        try:
            data = codec.decode(raw)
        except DecodeError:
            logger.debug("%s: undecodable payload for %s", type(self).__name__, key)
            raise
        except (ValueError, TypeError, RecursionError) as exc:
            logger.debug("%s: undecodable payload for %s", type(self).__name__, key)
            raise DecodeError(f"Could not decode session {key}: {exc}", exc) from exc
        return Session(key, data)

    async def __aenter__(self) -> SessionStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["SessionStore"]
