# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""HTTP transport for the Daytona API.

The transport only sends a request and reports what came back. It does
not retry, and it does not interpret failure statuses: a 4xx/5xx is a
normal RawResponse here.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from daytona_mcp._auth import resolve_auth
from daytona_mcp._defaults import ClientDefaults
from daytona_mcp._types import RawResponse, RequestTarget
from daytona_mcp.exceptions import LocalInvalidError, UnreachableError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def request(self, target: RequestTarget) -> RawResponse: ...

    async def aclose(self) -> None: ...


def _decode_body(response: httpx.Response, *, expects_text: bool) -> Any:
    text = response.text
    if not text:
        return text
    # Failure bodies are JSON on every route, text routes included.
    if response.is_success:
        if expects_text or "json" not in response.headers.get("content-type", ""):
            return text
    try:
        return response.json()
    except ValueError:
        logger.debug("Response declared JSON but did not parse, keeping text")
        return text


class HttpxTransport:
    """Transport backed by a shared httpx.AsyncClient.

    Example:
        ```python
        async with HttpxTransport(ClientDefaults.from_env()) as transport:
            raw = await transport.request(resolve("getSandbox", {"sandbox_id": "abc"}))
        ```
    """

    def __init__(
        self,
        defaults: ClientDefaults | None = None,
        *,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._defaults = defaults or ClientDefaults.from_env()
        if client is None:
            auth = resolve_auth(api_key)
            client = httpx.AsyncClient(
                base_url=self._defaults.normalized_base_url,
                headers={"Content-Type": "application/json", **auth.headers},
                timeout=self._defaults.request_timeout_seconds,
            )
        self._client = client

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, target: RequestTarget) -> RawResponse:
        """Send one request and return the raw outcome.

        Raises:
            UnreachableError: If the request was sent but no response arrived
            LocalInvalidError: If the request could not be built or sent
        """
        logger.debug("Daytona request method=%s path=%s", target.method, target.path)
        try:
            response = await self._client.request(
                target.method,
                target.path,
                params=target.query or None,
                headers=target.headers or None,
                json=target.body,
            )
        except (httpx.UnsupportedProtocol, httpx.LocalProtocolError, httpx.InvalidURL) as e:
            raise LocalInvalidError(str(e) or type(e).__name__) from e
        except (
            httpx.TimeoutException,
            httpx.NetworkError,
            httpx.RemoteProtocolError,
            httpx.ProxyError,
        ) as e:
            raise UnreachableError(str(e) or type(e).__name__) from e

        logger.debug(
            "Daytona response method=%s path=%s status=%s",
            target.method,
            target.path,
            response.status_code,
        )
        return RawResponse(
            status_code=response.status_code,
            body=_decode_body(response, expects_text=target.expects_text),
            text=response.text,
        )
