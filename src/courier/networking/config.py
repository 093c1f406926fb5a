"""Configuration models for the HttpClient interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class RedirectPolicy(str, Enum):
    """How the transport treats 3xx responses."""

    NEVER = "never"
    ALWAYS = "always"
    # Follow redirects except an https -> http downgrade.
    NORMAL = "normal"


class HttpVersion(str, Enum):
    """Preferred protocol version for outgoing requests."""

    HTTP_1_1 = "HTTP/1.1"
    HTTP_2 = "HTTP/2"


def _default_headers() -> Mapping[str, str]:
    """Return immutable empty default headers mapping."""

    return MappingProxyType({})


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HttpClient behavior.

    Captured once when the client is built; the transport session and the
    execution pool are derived from it and reused for the client's lifetime.
    ``default_content_type`` only seeds the client's runtime-settable
    attribute of the same name.
    """

    base_url: str = ""
    connect_timeout_seconds: float = 60.0
    read_timeout_seconds: float = 60.0
    redirect_policy: RedirectPolicy = RedirectPolicy.ALWAYS
    http_version: HttpVersion = HttpVersion.HTTP_1_1
    default_content_type: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=_default_headers)
    user_agent: str | None = None
    verify_tls: bool = True
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if self.connect_timeout_seconds <= 0:
            raise ValueError("connect_timeout_seconds must be > 0")
        if self.read_timeout_seconds <= 0:
            raise ValueError("read_timeout_seconds must be > 0")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1 when provided")

        # Accept plain strings for the enum fields.
        object.__setattr__(
            self, "redirect_policy", RedirectPolicy(self.redirect_policy)
        )
        object.__setattr__(self, "http_version", HttpVersion(self.http_version))

        # Freeze copied headers to avoid post-init mutation side effects.
        object.__setattr__(
            self,
            "default_headers",
            MappingProxyType(dict(self.default_headers)),
        )

    @property
    def timeout(self) -> tuple[float, float]:
        """Per-request ``(connect, read)`` timeout tuple for requests."""
        return (self.connect_timeout_seconds, self.read_timeout_seconds)
