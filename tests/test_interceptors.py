import requests

from courier.networking.interceptors import (
    bearer_token_interceptor,
    header_interceptor,
)


def test_header_interceptor_sets_header():
    request = requests.Request("GET", "http://example.com", headers={})

    header_interceptor("X-Request-Id", "abc")(request)

    assert request.headers["X-Request-Id"] == "abc"


def test_header_interceptor_overwrites_existing_value():
    request = requests.Request(
        "GET", "http://example.com", headers={"X-Request-Id": "old"}
    )

    header_interceptor("X-Request-Id", "new")(request)

    assert request.headers["X-Request-Id"] == "new"


def test_bearer_token_interceptor_calls_provider_per_request():
    tokens = iter(["first", "second"])
    intercept = bearer_token_interceptor(lambda: next(tokens))

    one = requests.Request("GET", "http://example.com", headers={})
    two = requests.Request("GET", "http://example.com", headers={})
    intercept(one)
    intercept(two)

    assert one.headers["Authorization"] == "Bearer first"
    assert two.headers["Authorization"] == "Bearer second"
