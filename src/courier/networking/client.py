"""Synchronous HTTP client for the courier networking layer.

``HttpClient`` renders a URL from a path template, attaches headers and a
serialized body, runs the registered interceptors, sends the request and
deserializes the response. Every failure is raised as one of the
``courier.networking.errors`` types; nothing is retried.
"""

from __future__ import annotations

import logging
from concurrent.futures import CancelledError, Executor, ThreadPoolExecutor
from enum import Enum
from types import TracebackType
from typing import Mapping, Sequence, TypeVar
from urllib.parse import urljoin, urlparse

import requests
from requests.structures import CaseInsensitiveDict

from .config import HttpClientConfig, HttpVersion, RedirectPolicy
from .errors import (
    ConnectError,
    HttpResponseNotOKError,
    RequestInterruptedError,
    RequestTimeoutError,
    SerializationError,
    TransportError,
)
from .interceptors import Interceptor
from .serializers import BodySerializer
from .urls import render_path, render_query, resolve

logger = logging.getLogger(__name__)

RequestValue = TypeVar("RequestValue")
ResponseValue = TypeVar("ResponseValue")

CONTENT_TYPE = "Content-Type"


def _declared_charset(content_type: str) -> str | None:
    """Return the ``charset`` parameter of a Content-Type value, if any."""
    for param in content_type.split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset":
            return value.strip().strip("'\"") or None
    return None


def _response_text(response: requests.Response) -> str:
    """Decode the raw body for error reporting.

    Only an explicit charset is trusted; otherwise UTF-8 is assumed, unlike
    ``response.text`` which falls back to ISO-8859-1 for ``text/*``.
    """
    charset = _declared_charset(response.headers.get(CONTENT_TYPE, ""))
    try:
        return response.content.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return response.content.decode("utf-8", errors="replace")


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"


class _RedirectPolicySession(requests.Session):
    """Session that refuses https -> http redirects under ``NORMAL``."""

    def __init__(self, redirect_policy: RedirectPolicy) -> None:
        super().__init__()
        self._redirect_policy = redirect_policy

    def get_redirect_target(self, resp: requests.Response) -> str | None:
        target = super().get_redirect_target(resp)
        if target is None or self._redirect_policy is not RedirectPolicy.NORMAL:
            return target
        current = urlparse(resp.url).scheme
        following = urlparse(urljoin(resp.url, target)).scheme
        if current == "https" and following == "http":
            logger.info(
                "not following insecure redirect. url: %s, location: %s",
                resp.url,
                target,
            )
            return None
        return target


class HttpClient:
    """Core HTTP client (sync).

    Build once and reuse: the ``requests.Session`` and the execution pool are
    created in the constructor and shared by every call. Calls block the
    invoking thread until the full response body has been read.

    The client is safe to share between threads. ``default_content_type`` is
    the only mutable setting and is read without locking when each request
    is built; set it before concurrent use starts.
    """

    def __init__(
        self,
        config: HttpClientConfig,
        *,
        interceptors: Sequence[Interceptor] = (),
        executor: Executor | None = None,
    ) -> None:
        """Create a new HttpClient.

        Args:
            config: Base URL, timeouts, redirect policy and header defaults.
            interceptors: Callbacks applied, in order, to every request.
            executor: Pool the transport runs on. When omitted the client
                creates a thread pool and shuts it down in ``close``;
                a supplied executor is left for the caller to dispose of.
        """
        self._config = config
        self._interceptors: tuple[Interceptor, ...] = tuple(interceptors)
        self._owns_executor = executor is None
        if executor is None:
            executor = ThreadPoolExecutor(
                max_workers=config.max_workers,
                thread_name_prefix="courier-http",
            )
        self._executor = executor
        self.default_content_type = config.default_content_type

        if config.http_version is HttpVersion.HTTP_2:
            logger.warning(
                "HTTP/2 is not available on the requests transport; "
                "falling back to HTTP/1.1"
            )

        self._session = _RedirectPolicySession(config.redirect_policy)
        self._session.verify = config.verify_tls
        if self._config.user_agent:
            self._session.headers["User-Agent"] = self._config.user_agent
        self._session.headers.update(self._config.default_headers)

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return self._interceptors

    def close(self) -> None:
        """Release the session and, if the client created it, the pool."""
        self._session.close()
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _has_content_type(self, request: requests.Request) -> bool:
        for headers in (request.headers or {}, self._session.headers):
            if any(name.lower() == "content-type" for name in headers):
                return True
        return False

    def _serialize_body(
        self,
        method: str,
        url: str,
        body: RequestValue | None,
        serializer: BodySerializer[RequestValue] | None,
    ) -> bytes | None:
        if body is None:
            return None
        assert serializer is not None
        try:
            return serializer.serialize(body)
        except Exception as exc:
            raise SerializationError(
                f"failed to serialize request body: {exc}",
                method=method,
                url=url,
            ) from exc

    def _deserialize_body(
        self,
        method: str,
        url: str,
        payload: bytes,
        serializer: BodySerializer[ResponseValue],
    ) -> ResponseValue:
        try:
            return serializer.deserialize(payload)
        except Exception as exc:
            raise SerializationError(
                f"failed to deserialize response body: {exc}",
                method=method,
                url=url,
            ) from exc

    def _handle_request_exception(
        self,
        method: str,
        url: str,
        e: requests.exceptions.RequestException,
    ) -> TransportError:
        """Map requests exceptions to courier errors."""
        if isinstance(e, requests.exceptions.Timeout):
            return RequestTimeoutError(str(e), method=method, url=url)

        if isinstance(e, requests.exceptions.ConnectionError):
            return ConnectError(str(e), method=method, url=url)

        # Generic fallback for other request exceptions
        return TransportError(str(e), method=method, url=url)

    def _send(
        self, method: str, url: str, request: requests.Request
    ) -> requests.Response:
        """Prepare ``request`` and block until the response is read."""
        try:
            prepared = self._session.prepare_request(request)
            settings = self._session.merge_environment_settings(
                prepared.url, {}, None, self._config.verify_tls, None
            )
        except requests.exceptions.RequestException as exc:
            raise self._handle_request_exception(method, url, exc) from exc

        try:
            future = self._executor.submit(
                self._session.send,
                prepared,
                timeout=self._config.timeout,
                allow_redirects=(
                    self._config.redirect_policy is not RedirectPolicy.NEVER
                ),
                **settings,
            )
        except RuntimeError as exc:
            # pool already shut down
            raise RequestInterruptedError(
                str(exc), method=method, url=url
            ) from exc

        try:
            return future.result()
        except requests.exceptions.RequestException as exc:
            raise self._handle_request_exception(method, url, exc) from exc
        except CancelledError as exc:
            raise RequestInterruptedError(
                "request was cancelled before a response arrived",
                method=method,
                url=url,
            ) from exc

    def request(
        self,
        method: HttpMethod | str,
        path_template: str,
        *,
        path_params: Mapping[str, str] | None = None,
        query_params: Mapping[str, Sequence[str]] | None = None,
        headers: Mapping[str, str] | None = None,
        body: RequestValue | None = None,
        request_serializer: BodySerializer[RequestValue] | None = None,
        response_serializer: BodySerializer[ResponseValue],
    ) -> ResponseValue:
        """Send one request and return the deserialized 200 response.

        Args:
            method: HTTP verb.
            path_template: Path with ``{name}`` placeholders, or an absolute
                ``http(s)://`` URL that bypasses the base URL.
            path_params: Placeholder name -> raw value; values are encoded.
            query_params: Key -> list of values; repeated keys allowed.
            headers: Headers applied before interceptors run.
            body: Optional value to send; ``None`` sends an empty body.
            request_serializer: Encodes ``body``; required when body is set.
            response_serializer: Decodes the 200 response body.

        Returns:
            The value produced by ``response_serializer``.

        Raises:
            TransportError: The request failed before a response arrived.
            SerializationError: The body could not be encoded or decoded.
            HttpResponseNotOKError: The status code was not 200.
        """
        if response_serializer is None:
            raise ValueError("response_serializer is required")
        if body is not None and request_serializer is None:
            raise ValueError("request_serializer is required when body is set")

        verb = (
            method.value if isinstance(method, HttpMethod) else method.upper()
        )

        path = render_path(path_template, path_params)
        logger.debug(
            "rendered path params. method: %s, path: %s, "
            "path template: %s, params: %s",
            verb,
            path,
            path_template,
            path_params,
        )
        url = resolve(self._config.base_url, path) + render_query(query_params)
        logger.info("rendered url. method: %s, url: %s", verb, url)

        payload = self._serialize_body(verb, url, body, request_serializer)
        request = requests.Request(
            method=verb,
            url=url,
            headers=CaseInsensitiveDict(),
            data=payload,
        )
        logger.debug("created request. url: %s, body: %r", url, body)

        if headers:
            request.headers.update(headers)
            logger.debug("set headers. url: %s, headers: %s", url, headers)

        for interceptor in self._interceptors:
            interceptor(request)

        default_content_type = self.default_content_type
        if default_content_type is not None and not self._has_content_type(
            request
        ):
            request.headers[CONTENT_TYPE] = default_content_type

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "sending request to %s. method: %s, url: %s, headers: %s",
                self._config.base_url,
                request.method,
                request.url,
                dict(request.headers),
            )
        else:
            logger.info(
                "sending request to %s. method: %s, url: %s",
                self._config.base_url,
                request.method,
                request.url,
            )

        response = self._send(verb, url, request)
        logger.debug(
            "received response from %s. url: %s, status code: %s, "
            "response headers: %s, response body: %r",
            self._config.base_url,
            url,
            response.status_code,
            dict(response.headers),
            response.content,
        )

        if response.status_code != 200:
            raise HttpResponseNotOKError(
                response.status_code,
                _response_text(response),
                method=verb,
                url=url,
                reason=response.reason,
            )
        logger.info("request to %s ok. url: %s", self._config.base_url, url)
        return self._deserialize_body(
            verb, url, response.content, response_serializer
        )

    def get(
        self,
        path_template: str,
        *,
        path_params: Mapping[str, str] | None = None,
        query_params: Mapping[str, Sequence[str]] | None = None,
        headers: Mapping[str, str] | None = None,
        response_serializer: BodySerializer[ResponseValue],
    ) -> ResponseValue:
        """Perform an HTTP GET request. See ``request``."""
        return self.request(
            HttpMethod.GET,
            path_template,
            path_params=path_params,
            query_params=query_params,
            headers=headers,
            response_serializer=response_serializer,
        )

    def post(
        self,
        path_template: str,
        *,
        path_params: Mapping[str, str] | None = None,
        query_params: Mapping[str, Sequence[str]] | None = None,
        headers: Mapping[str, str] | None = None,
        body: RequestValue | None = None,
        request_serializer: BodySerializer[RequestValue] | None = None,
        response_serializer: BodySerializer[ResponseValue],
    ) -> ResponseValue:
        """Perform an HTTP POST request. See ``request``."""
        return self.request(
            HttpMethod.POST,
            path_template,
            path_params=path_params,
            query_params=query_params,
            headers=headers,
            body=body,
            request_serializer=request_serializer,
            response_serializer=response_serializer,
        )

    def put(
        self,
        path_template: str,
        *,
        path_params: Mapping[str, str] | None = None,
        query_params: Mapping[str, Sequence[str]] | None = None,
        headers: Mapping[str, str] | None = None,
        body: RequestValue | None = None,
        request_serializer: BodySerializer[RequestValue] | None = None,
        response_serializer: BodySerializer[ResponseValue],
    ) -> ResponseValue:
        """Perform an HTTP PUT request. See ``request``."""
        return self.request(
            HttpMethod.PUT,
            path_template,
            path_params=path_params,
            query_params=query_params,
            headers=headers,
            body=body,
            request_serializer=request_serializer,
            response_serializer=response_serializer,
        )

    def patch(
        self,
        path_template: str,
        *,
        path_params: Mapping[str, str] | None = None,
        query_params: Mapping[str, Sequence[str]] | None = None,
        headers: Mapping[str, str] | None = None,
        body: RequestValue | None = None,
        request_serializer: BodySerializer[RequestValue] | None = None,
        response_serializer: BodySerializer[ResponseValue],
    ) -> ResponseValue:
        """Perform an HTTP PATCH request. See ``request``."""
        return self.request(
            HttpMethod.PATCH,
            path_template,
            path_params=path_params,
            query_params=query_params,
            headers=headers,
            body=body,
            request_serializer=request_serializer,
            response_serializer=response_serializer,
        )

    def delete(
        self,
        path_template: str,
        *,
        path_params: Mapping[str, str] | None = None,
        query_params: Mapping[str, Sequence[str]] | None = None,
        headers: Mapping[str, str] | None = None,
        body: RequestValue | None = None,
        request_serializer: BodySerializer[RequestValue] | None = None,
        response_serializer: BodySerializer[ResponseValue],
    ) -> ResponseValue:
        """Perform an HTTP DELETE request. See ``request``."""
        return self.request(
            HttpMethod.DELETE,
            path_template,
            path_params=path_params,
            query_params=query_params,
            headers=headers,
            body=body,
            request_serializer=request_serializer,
            response_serializer=response_serializer,
        )
