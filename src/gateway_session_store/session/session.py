"""Session entity: a session identifier paired with a typed payload.

Classes
-------
- Session  — immutable ``(id, data)`` pair
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from gateway_session_store.session.identifier import SessionId

A = TypeVar("A")
B = TypeVar("B")


@dataclass(frozen=True)
class Session(Generic[A]):
    """A session payload addressed by its identifier.

    Equality and hashing cover both fields, so ``data`` must be hashable
    when sessions are kept in a set.
    """

    id: SessionId
    data: A

    def map(self, fn: Callable[[A], B]) -> Session[B]:
        """Return a session with the same id and ``fn(data)`` as payload."""
        return Session(self.id, fn(self.data))


__all__ = ["Session"]
