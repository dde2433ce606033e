"""gateway-session-store — pluggable session persistence for an auth gateway.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import gateway_session_store
>>> gateway_session_store.__version__
'0.1.0'
"""
from __future__ import annotations

# Data model
from gateway_session_store.session import Session, SessionId

# Codecs
from gateway_session_store.codec import BytesCodec, Codec, JsonCodec, ModelCodec, TextCodec

# Errors
from gateway_session_store.errors import (
    ConfigurationError,
    DecodeError,
    SessionStoreError,
    StoreError,
)

# Stores
from gateway_session_store.storage.base import SessionStore
from gateway_session_store.storage.memcached import MemcachedStore
from gateway_session_store.storage.memory import InMemoryStore
from gateway_session_store.storage.redis import RedisStore

# Configuration
from gateway_session_store.config import StoreConfig
from gateway_session_store.factory import create_store

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    # Data model
    "Session",
    "SessionId",
    # Codecs
    "BytesCodec",
    "Codec",
    "JsonCodec",
    "ModelCodec",
    "TextCodec",
    # Errors
    "ConfigurationError",
    "DecodeError",
    "SessionStoreError",
    "StoreError",
    # Stores
    "InMemoryStore",
    "MemcachedStore",
    "RedisStore",
    "SessionStore",
    # Configuration
    "StoreConfig",
    "create_store",
]
