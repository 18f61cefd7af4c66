from __future__ import annotations

import httpx
import pytest

from snipweave.core import http


def _transport(calls, *, status=200, body=b"payload"):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status, content=body)

    return httpx.MockTransport(handler)


def test_fetch_url_returns_body_and_sends_headers():
    calls = []

    data = http.fetch_url(
        "https://example.com/lib.rs",
        token="secret",
        transport=_transport(calls),
    )

    assert data == b"payload"
    (request,) = calls
    assert request.url == "https://example.com/lib.rs"
    assert request.headers["User-Agent"] == http.USER_AGENT
    assert request.headers["Authorization"] == "Bearer secret"


def test_fetch_url_without_token_omits_authorization():
    calls = []

    http.fetch_url("https://example.com/a", transport=_transport(calls))

    assert "Authorization" not in calls[0].headers


def test_fetch_url_raises_for_error_status():
    with pytest.raises(httpx.HTTPStatusError):
        http.fetch_url(
            "https://example.com/missing",
            transport=_transport([], status=404, body=b"nope"),
        )


def test_fetch_url_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, content=b"moved")

    data = http.fetch_url(
        "https://example.com/old", transport=httpx.MockTransport(handler)
    )

    assert data == b"moved"


def test_connection_errors_propagate():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(httpx.HTTPError):
        http.fetch_url(
            "https://example.com/a", transport=httpx.MockTransport(handler)
        )


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ({}, None),
        ({http.TOKEN_ENV: "  "}, None),
        ({http.TOKEN_ENV: " abc "}, "abc"),
    ],
)
def test_token_from_env(env, expected):
    assert http.token_from_env(env) == expected
