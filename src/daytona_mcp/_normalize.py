# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Turn raw transport outcomes into success or failure envelopes."""

from __future__ import annotations

import json
import logging
from typing import Any

from daytona_mcp._types import (
    CommandResult,
    ErrorKind,
    PlainText,
    RawResponse,
    RenderedRecord,
    SandboxState,
    ToolFailure,
    ToolSuccess,
)
from daytona_mcp.exceptions import (
    DaytonaAuthenticationError,
    DaytonaError,
    NotFoundError,
    RemoteRejectedError,
)

logger = logging.getLogger(__name__)

NO_RESPONSE_MESSAGE = "No response received"


def _remote_detail(raw: RawResponse) -> str | None:
    body = raw.body
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, list):
            return "; ".join(str(item) for item in message)
        if message:
            return str(message)
        return json.dumps(body, default=str)
    if isinstance(body, list):
        return json.dumps(body, default=str)
    if body:
        return str(body)
    return raw.text or None


def rejection_from_response(raw: RawResponse) -> RemoteRejectedError:
    """Build the exception for a response that carries a failure status."""
    detail = _remote_detail(raw)
    message = f"{raw.status_code} - {detail}" if detail else str(raw.status_code)
    if raw.status_code == 404:
        return NotFoundError(message, status_code=raw.status_code, detail=detail)
    if raw.status_code in (401, 403):
        return DaytonaAuthenticationError(message, status_code=raw.status_code, detail=detail)
    return RemoteRejectedError(message, status_code=raw.status_code, detail=detail)


def classify(exc: BaseException, *, context: str) -> ToolFailure:
    """Classify an exception raised while running an operation.

    Args:
        exc: The exception raised by the resolver, transport or normalizer
        context: Operation-specific prefix, e.g. "Failed to start sandbox abc"

    Returns:
        ToolFailure with the kind taken from the exception
    """
    if isinstance(exc, DaytonaError):
        kind = exc.kind
    else:
        kind = ErrorKind.UNKNOWN

    if kind == ErrorKind.UNREACHABLE:
        message = f"{context}: {NO_RESPONSE_MESSAGE}"
    else:
        message = f"{context}: {exc}"

    status_code = exc.status_code if isinstance(exc, RemoteRejectedError) else None
    logger.warning("%s kind=%s", message, kind.value)
    return ToolFailure(kind=kind, message=message, status_code=status_code)


def success(
    title: str,
    body: Any,
    *,
    fallback: str | None = None,
    preformatted: bool = False,
    payload: Any = None,
    state: SandboxState | None = None,
) -> ToolSuccess:
    """Wrap a successful response body in a success envelope.

    Strings become PlainText, everything else a RenderedRecord. An empty
    body is replaced by fallback when one is given.
    """
    if fallback is not None and (body is None or body == "" or body == {}):
        body = fallback
        preformatted = False
    if body is None:
        body = ""
    if isinstance(body, str):
        content: PlainText | RenderedRecord = PlainText(body, preformatted=preformatted)
    else:
        content = RenderedRecord(body)
    return ToolSuccess(
        title=title,
        content=content,
        payload=body if payload is None else payload,
        state=state,
    )


def command_success(title: str, result: CommandResult, *, include_id: bool = False) -> ToolSuccess:
    """Success envelope for an execution result: exit code, then output."""
    lines: list[str] = []
    if include_id:
        lines.append(f"**Command ID:** {result.command_id or 'N/A'}")
        lines.append("")
    exit_code = "N/A" if result.exit_code is None else str(result.exit_code)
    lines.append(f"**Exit Code:** {exit_code}")
    lines.append("")
    output = result.output
    if not output and result.running:
        output = "No output or command running asynchronously"
    lines.append("**Output:**")
    lines.append("```")
    lines.append(output or "")
    lines.append("```")
    return ToolSuccess(title=title, content=PlainText("\n".join(lines)), payload=result)
