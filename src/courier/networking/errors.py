"""Error types raised by the HttpClient.

Every failure of a request surfaces as exactly one of three kinds, so call
sites can branch on the class or on ``error.kind``:

* ``TransportError``: the request never produced a response.
* ``SerializationError``: a body could not be encoded or decoded.
* ``HttpResponseNotOKError``: the server answered with a status other than 200.

Nothing here is retried; retry policy belongs to the caller.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    SERIALIZATION = "serialization"
    STATUS = "status"


class HttpClientError(Exception):
    """Base class for all HttpClient errors."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url


class TransportError(HttpClientError):
    """Network-level failure; the underlying exception is the ``__cause__``."""

    kind = ErrorKind.TRANSPORT


class RequestTimeoutError(TransportError):
    """Connecting or reading exceeded the configured timeout."""


class ConnectError(TransportError):
    """The connection could not be established or was dropped."""


class RequestInterruptedError(TransportError):
    """The blocking wait for a response was cancelled."""


class SerializationError(HttpClientError):
    """A serializer failed to encode a request or decode a response."""

    kind = ErrorKind.SERIALIZATION


class HttpResponseNotOKError(HttpClientError):
    """The server returned a status code other than 200.

    ``body`` holds the raw response text exactly as received.
    """

    kind = ErrorKind.STATUS

    def __init__(
        self,
        status_code: int,
        body: str,
        *,
        method: str | None = None,
        url: str | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(body, method=method, url=url)
        self.status_code = status_code
        self.body = body
        self.reason = reason

    def __str__(self) -> str:
        target = f" for {self.method} {self.url}" if self.url else ""
        return f"HTTP {self.status_code}{target}: {self.body}"
