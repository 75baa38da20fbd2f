from __future__ import annotations

import pytest

from pytokenserver._constants import DEFAULT_ENDPOINT_URL, DEFAULT_REQUEST_TIMEOUT
from pytokenserver.config import TokenServerConfig
from pytokenserver.exceptions import TokenServerConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TOKENSERVER_URL", "TOKENSERVER_TIMEOUT", "TOKENSERVER_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = TokenServerConfig()
    assert config.endpoint_url == DEFAULT_ENDPOINT_URL
    assert config.request_timeout == DEFAULT_REQUEST_TIMEOUT


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOKENSERVER_URL", " https://token.example.com:8443/1.0/sync/1.5 ")
    monkeypatch.setenv("TOKENSERVER_TIMEOUT", "2.5")
    monkeypatch.setenv("TOKENSERVER_USER_AGENT", "tests/1.0")

    config = TokenServerConfig.from_env()
    assert config.endpoint_url == "https://token.example.com:8443/1.0/sync/1.5"
    assert config.request_timeout == 2.5
    assert config.user_agent == "tests/1.0"


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOKENSERVER_URL", "https://token.example.com/1.0/sync/1.5")
    monkeypatch.setenv("TOKENSERVER_TIMEOUT", "not-a-number")

    config = TokenServerConfig.from_env(endpoint_url="http://localhost:5000/token", request_timeout=1.0)
    assert config.endpoint_url == "http://localhost:5000/token"
    assert config.request_timeout == 1.0


def test_from_env_rejects_bad_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOKENSERVER_TIMEOUT", "soon")
    with pytest.raises(TokenServerConfigError):
        TokenServerConfig.from_env()


@pytest.mark.parametrize("url", ["/1.0/sync/1.5", "ftp://token.example.com/", "https:///path"])
def test_rejects_non_http_endpoint(url: str) -> None:
    with pytest.raises(TokenServerConfigError):
        TokenServerConfig(endpoint_url=url)


def test_rejects_non_positive_timeout() -> None:
    with pytest.raises(TokenServerConfigError):
        TokenServerConfig(request_timeout=0)
