"""Payload codecs.

A codec converts a typed session payload to bytes and back.  Stores apply
the codec at their boundary only and never look inside the payload.

``decode`` must not raise anything but ``DecodeError`` for arbitrary input:
every stock codec wraps the underlying conversion error so that callers
can rely on a single failure type.

Classes
-------
- Codec       — protocol implemented by all codecs
- BytesCodec  — identity codec for raw ``bytes`` payloads
- TextCodec   — ``str`` payloads in a fixed text encoding
- JsonCodec   — JSON-compatible Python values
- ModelCodec  — pydantic ``BaseModel`` payloads
"""
from __future__ import annotations

import json
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError

from gateway_session_store.errors import DecodeError

A = TypeVar("A")
M = TypeVar("M", bound=BaseModel)


@runtime_checkable
class Codec(Protocol[A]):
    """Encode ``A`` to bytes and decode it back.

    Implementations must satisfy ``decode(encode(x)) == x``.
    """

    def encode(self, data: A) -> bytes: ...

    def decode(self, raw: bytes) -> A: ...


class BytesCodec:
    """Pass-through codec for payloads that already are bytes."""

    def encode(self, data: bytes) -> bytes:
        return bytes(data)

    def decode(self, raw: bytes) -> bytes:
        return bytes(raw)

    def __repr__(self) -> str:
        return "BytesCodec()"


class TextCodec:
    """Codec for ``str`` payloads.

    Parameters
    ----------
    encoding:
        Text encoding used on both sides.  Defaults to ``"utf-8"``.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def encode(self, data: str) -> bytes:
        return data.encode(self.encoding)

    def decode(self, raw: bytes) -> str:
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Payload is not valid {self.encoding}: {exc}", exc) from exc

    def __repr__(self) -> str:
        return f"TextCodec(encoding={self.encoding!r})"


class JsonCodec:
    """Codec for JSON-compatible values (dicts, lists, strings, numbers).

    Output is compact UTF-8 JSON with sorted keys so that equal payloads
    always produce identical bytes.
    """

    def encode(self, data: Any) -> bytes:
        return json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8")

    def decode(self, raw: bytes) -> Any:
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(f"Payload is not valid JSON: {exc}", exc) from exc
        except RecursionError as exc:
            raise DecodeError("Payload is nested too deeply to decode as JSON", exc) from exc

    def __repr__(self) -> str:
        return "JsonCodec()"


class ModelCodec(Generic[M]):
    """Codec for pydantic models.

    Parameters
    ----------
    model_type:
        The ``BaseModel`` subclass to validate decoded payloads against.
    """

    def __init__(self, model_type: type[M]) -> None:
        self.model_type = model_type

    def encode(self, data: M) -> bytes:
        return data.model_dump_json().encode("utf-8")

    def decode(self, raw: bytes) -> M:
        try:
            return self.model_type.model_validate_json(raw)
        except ValidationError as exc:
            raise DecodeError(
                f"Payload is not a valid {self.model_type.__name__}: {exc}", exc
            ) from exc

    def __repr__(self) -> str:
        return f"ModelCodec({self.model_type.__name__})"


__all__ = ["BytesCodec", "Codec", "JsonCodec", "ModelCodec", "TextCodec"]
