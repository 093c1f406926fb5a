# pyright: reportUnknownMemberType=false
import pytest

from courier.networking.config import (
    HttpClientConfig,
    HttpVersion,
    RedirectPolicy,
)


def test_config_defaults_are_stable():
    config = HttpClientConfig()

    assert config.base_url == ""
    assert config.connect_timeout_seconds == 60.0
    assert config.read_timeout_seconds == 60.0
    assert config.redirect_policy is RedirectPolicy.ALWAYS
    assert config.http_version is HttpVersion.HTTP_1_1
    assert config.default_content_type is None
    assert dict(config.default_headers) == {}
    assert config.user_agent is None
    assert config.verify_tls is True
    assert config.max_workers is None
    assert config.timeout == (60.0, 60.0)


def test_config_default_headers_are_independent():
    first = HttpClientConfig()
    second = HttpClientConfig()

    assert first.default_headers is not second.default_headers


def test_config_default_headers_are_immutable():
    config = HttpClientConfig(default_headers={"X-Test": "1"})

    with pytest.raises(TypeError):
        config.default_headers["X-Test"] = "2"  # type: ignore[index]


def test_config_copies_external_headers_input():
    headers = {"X-Test": "1"}
    config = HttpClientConfig(default_headers=headers)
    headers["X-Test"] = "2"

    assert config.default_headers["X-Test"] == "1"


def test_config_is_frozen():
    config = HttpClientConfig()

    with pytest.raises(AttributeError):
        config.base_url = "http://other"  # type: ignore[misc]


def test_config_accepts_enum_values_as_strings():
    config = HttpClientConfig(
        redirect_policy="never",  # type: ignore[arg-type]
        http_version="HTTP/2",  # type: ignore[arg-type]
    )

    assert config.redirect_policy is RedirectPolicy.NEVER
    assert config.http_version is HttpVersion.HTTP_2


def test_config_rejects_unknown_redirect_policy():
    with pytest.raises(ValueError):
        HttpClientConfig(redirect_policy="sometimes")  # type: ignore[arg-type]


def test_config_timeout_tuple_uses_connect_and_read():
    config = HttpClientConfig(
        connect_timeout_seconds=1.5, read_timeout_seconds=30
    )

    assert config.timeout == (1.5, 30)


def test_config_rejects_non_positive_timeouts():
    with pytest.raises(ValueError):
        HttpClientConfig(connect_timeout_seconds=0)
    with pytest.raises(ValueError):
        HttpClientConfig(connect_timeout_seconds=-1)

    with pytest.raises(ValueError):
        HttpClientConfig(read_timeout_seconds=0)
    with pytest.raises(ValueError):
        HttpClientConfig(read_timeout_seconds=-1)


def test_config_rejects_invalid_max_workers():
    with pytest.raises(ValueError):
        HttpClientConfig(max_workers=0)
