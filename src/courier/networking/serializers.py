"""Body serializers: typed value <-> raw bytes.

The client accepts any object with ``serialize``/``deserialize``; the classes
below cover the common payload formats. Exceptions raised by a serializer are
wrapped by the client in ``SerializationError``.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class BodySerializer(Protocol[T]):
    """Bidirectional mapping between a value and a byte payload."""

    def serialize(self, value: T) -> bytes: ...

    def deserialize(self, payload: bytes) -> T: ...


class BytesSerializer:
    """Pass raw bytes through untouched."""

    def serialize(self, value: bytes) -> bytes:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(
                f"expected bytes, got {type(value).__name__}"
            )
        return bytes(value)

    def deserialize(self, payload: bytes) -> bytes:
        return payload


class TextSerializer:
    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def serialize(self, value: str) -> bytes:
        return value.encode(self.encoding)

    def deserialize(self, payload: bytes) -> str:
        return payload.decode(self.encoding)


class JsonSerializer:
    """JSON bodies via the stdlib ``json`` module.

    Keyword arguments are forwarded to ``json.dumps``. An empty payload
    decodes to ``None``.
    """

    def __init__(self, **dumps_kwargs: Any) -> None:
        self._dumps_kwargs = dumps_kwargs

    def serialize(self, value: Any) -> bytes:
        return json.dumps(value, **self._dumps_kwargs).encode("utf-8")

    def deserialize(self, payload: bytes) -> Any:
        if not payload:
            return None
        return json.loads(payload)
