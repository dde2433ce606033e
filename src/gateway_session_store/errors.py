"""Exception hierarchy for gateway-session-store.

A missing session is not an error: ``SessionStore.get`` returns ``None``.
Transport failures raised by the backend clients (``redis.RedisError``,
``aiomcache`` client exceptions, ``OSError``) are not wrapped and reach the
caller unchanged.

Classes
-------
- SessionStoreError   — base class for errors raised by this package
- DecodeError         — stored bytes could not be decoded into a payload
- StoreError          — a session could not be written to the backend
- ConfigurationError  — invalid store configuration
"""
from __future__ import annotations

from typing import Any


class SessionStoreError(Exception):
    """Base class for all errors raised by gateway-session-store."""


class DecodeError(SessionStoreError, ValueError):
    """Raised when a codec cannot turn stored bytes back into a payload.

    Parameters
    ----------
    message:
        Human readable description.
    cause:
        The underlying conversion error, if any.  It is also available as
        ``__cause__`` when raised with ``raise ... from cause``.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class StoreError(SessionStoreError):
    """Raised when a session could not be written to the backend.

    Parameters
    ----------
    message:
        Human readable description.  Callers include the attempted session.
    session:
        The session whose write failed.
    """

    def __init__(self, message: str, session: Any = None) -> None:
        self.session = session
        super().__init__(message)


class ConfigurationError(SessionStoreError, ValueError):
    """Raised when a store configuration is invalid or incomplete."""


__all__ = [
    "ConfigurationError",
    "DecodeError",
    "SessionStoreError",
    "StoreError",
]
