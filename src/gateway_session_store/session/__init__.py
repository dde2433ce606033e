"""Session data model: identifiers and typed sessions."""
from __future__ import annotations

from gateway_session_store.session.identifier import SessionId
from gateway_session_store.session.session import Session

__all__ = ["Session", "SessionId"]
