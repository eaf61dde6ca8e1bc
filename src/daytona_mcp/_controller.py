# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from daytona_mcp._defaults import ClientDefaults
from daytona_mcp._normalize import classify, rejection_from_response, success
from daytona_mcp._resolver import resolve
from daytona_mcp._transport import Transport
from daytona_mcp._types import ToolResult, ToolSuccess

logger = logging.getLogger(__name__)


class BaseController:
    """Shared request/normalize pipeline for the resource controllers.

    Each public operation issues exactly one request and returns exactly
    one envelope. Exceptions never escape an operation: they are
    classified into a ToolFailure at this boundary.
    """

    def __init__(self, transport: Transport, defaults: ClientDefaults | None = None) -> None:
        self._transport = transport
        self._defaults = defaults or ClientDefaults()

    async def _send(self, operation: str, args: Mapping[str, Any], *, body: Any = None) -> Any:
        """Resolve, send and return the decoded body of a successful response.

        Raises:
            LocalInvalidError: If the request cannot be constructed
            UnreachableError: If no response arrived
            RemoteRejectedError: If the remote answered with a failure status
        """
        target = resolve(operation, args, body=body)
        raw = await self._transport.request(target)
        if not raw.ok:
            raise rejection_from_response(raw)
        return raw.body

    async def _run(self, context: str, operation: Callable[[], Awaitable[ToolSuccess]]) -> ToolResult:
        try:
            return await operation()
        except Exception as e:
            return classify(e, context=context)

    async def _call(
        self,
        operation: str,
        args: Mapping[str, Any],
        *,
        title: str,
        context: str,
        body: Any = None,
        fallback: str | None = None,
        preformatted: bool = False,
    ) -> ToolResult:
        """Run a plain forwarding operation whose body is shown as-is."""

        async def _forward() -> ToolSuccess:
            data = await self._send(operation, args, body=body)
            return success(title, data, fallback=fallback, preformatted=preformatted)

        return await self._run(context, _forward)
