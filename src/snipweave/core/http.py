"""HTTP helper used to fetch remote glossaries and documents."""

from __future__ import annotations

import os
from typing import Mapping, Optional

import httpx

__all__ = [
    "DEFAULT_TIMEOUT",
    "TOKEN_ENV",
    "USER_AGENT",
    "fetch_url",
    "token_from_env",
]

DEFAULT_TIMEOUT = 30.0
TOKEN_ENV = "SNIPWEAVE_HTTP_TOKEN"
USER_AGENT = "snipweave"


def fetch_url(
    url: str,
    *,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
    token: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> bytes:
    """GET ``url`` and return the response body.

    Non-2xx responses raise :class:`httpx.HTTPStatusError`; connection
    problems raise the matching :class:`httpx.HTTPError` subclass. There is
    no retry.
    """

    headers = {"User-Agent": USER_AGENT}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    with httpx.Client(
        timeout=timeout,
        headers=headers,
        follow_redirects=True,
        transport=transport,
    ) as client:
        response = client.get(url)
        response.raise_for_status()
        return response.content


def token_from_env(env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the bearer token configured for remote fetches, if any."""

    env_map = os.environ if env is None else env
    value = (env_map.get(TOKEN_ENV) or "").strip()
    return value or None
