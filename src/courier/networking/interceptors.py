"""Request interceptors.

An interceptor receives the in-progress ``requests.Request`` before it is
prepared and may change anything on it: headers, body, url or method.
Interceptors run in the order they were registered on the client.
"""

from __future__ import annotations

from typing import Callable

import requests

Interceptor = Callable[[requests.Request], None]


def header_interceptor(name: str, value: str) -> Interceptor:
    """Return an interceptor that sets ``name`` to ``value``."""

    def _intercept(request: requests.Request) -> None:
        request.headers[name] = value

    return _intercept


def bearer_token_interceptor(token_provider: Callable[[], str]) -> Interceptor:
    """Return an interceptor that adds ``Authorization: Bearer <token>``.

    ``token_provider`` is called once per request so rotating tokens are
    picked up without rebuilding the client.
    """

    def _intercept(request: requests.Request) -> None:
        request.headers["Authorization"] = f"Bearer {token_provider()}"

    return _intercept
